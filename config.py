# config.py - Centralized configuration for the application

# --- OAuth2 Configuration ---
# SCOPES: Full mail access. Permanent deletion (batchDelete) is refused for
# any narrower Gmail scope.
SCOPES = ['https://mail.google.com/']

# TOKEN_PATH: Path to the stored OAuth2 token file.
# This file stores user's access and refresh tokens, and is created
# automatically when the authorization flow completes for the first time.
# If you change SCOPES, delete this file so a new consent is requested.
TOKEN_PATH = 'token.json'

# CLIENT_SECRET_PATH: Path to the client secret JSON file downloaded from Google Cloud Console.
# This file is required for the OAuth2 flow to identify the application.
CLIENT_SECRET_PATH = 'credentials.json'

# --- Local redirect listener ---
# The provider redirects the browser to http://REDIRECT_HOST:REDIRECT_PORT REDIRECT_PATH
# after consent. The same URI must be registered for the OAuth client.
REDIRECT_HOST = 'localhost'
REDIRECT_PORT = 8080
REDIRECT_PATH = '/'

# STATE_TOKEN: Fixed anti-replay value sent with the authorization request.
STATE_TOKEN = 'state-token'

# AUTH_TIMEOUT: Seconds to wait for the browser redirect. None waits forever.
AUTH_TIMEOUT = None

# Body returned to the browser once the authorization code has been captured.
REDIRECT_RESPONSE_BODY = 'You may now close this window.'

# --- Gmail API ---
# USER_ID: 'me' addresses the authenticated user's own mailbox.
USER_ID = 'me'

# PAGE_SIZE: maxResults for each users.messages.list call (Gmail caps it at 500).
PAGE_SIZE = 500

# CHUNK_SIZE: Number of message ids sent in a single batchDelete call.
# MAX_CHUNK_SIZE is the hard limit the API accepts.
CHUNK_SIZE = 1000
MAX_CHUNK_SIZE = 1000

# CATEGORIES: Gmail inbox tabs that can be purged, in menu order.
CATEGORIES = ['primary', 'social', 'promotions', 'updates', 'forums']

# --- Debugging ---
# DEBUG: Global flag to enable or disable debug print statements and behaviors.
# Can be overridden by the --debug command-line argument.
DEBUG_MODE = False # Default to False, can be set by CLI
