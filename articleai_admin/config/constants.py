# caminho: articleai_admin/config/constants.py

# Constantes para o identificador do admin (handle escolhido por humanos)
ADMIN_ID_LENGTH_MIN = 1
ADMIN_ID_LENGTH_MAX = 64

# Bytes de entropia do token de sessão (token_urlsafe(32) -> 43 caracteres)
SESSION_TOKEN_BYTES = 32

# Chave única do token no armazenamento persistente do cliente
ADMIN_TOKEN_STORAGE_KEY = 'admin_session_token'

# Nome do fluxo de seleção de publishers nos envelopes
FLOW_PUBLISHER_SELECTION = 'publisher_selection'

# Mensagens exibidas ao usuário final
MESSAGE_INVALID_CREDENTIALS = 'Invalid credentials'
MESSAGE_SIGN_IN_AGAIN = 'Please sign in again'
MESSAGE_STORAGE_UNAVAILABLE = 'Could not save the session on this device'

# Declaração da URL de Obtenção do Token
OAUTH2_SCHEME_TOKEN_URL = '/admin/auth/sign-in'
