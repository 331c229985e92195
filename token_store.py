import json
import os

from google.oauth2.credentials import Credentials

# Import constants from config.py
from config import SCOPES, TOKEN_PATH
from errors import AuthError, TokenNotFound
from utils import debug_print

class TokenStore:
    def __init__(self, path=TOKEN_PATH, scopes=SCOPES):
        """Credential record kept as JSON on disk.

        Args:
            path: Location of the token file, relative to the working directory by default.
            scopes: Scopes attached to credentials loaded from the file.
        """
        self.path = path
        self.scopes = scopes

    def load(self) -> Credentials:
        """Read the stored credentials.

        Raises TokenNotFound when the file is missing or cannot be parsed, so the
        caller can fall back to the browser flow instead of failing the run.
        """
        if not os.path.exists(self.path):
            raise TokenNotFound(f"No token file at {self.path}")
        try:
            with open(self.path, 'r') as token_file:
                info = json.load(token_file)
            if isinstance(info, dict):
                # Access-token-only records store refresh_token as null.
                info.setdefault('refresh_token', None)
            creds = Credentials.from_authorized_user_info(info, self.scopes)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise TokenNotFound(f"Unable to parse token file {self.path}: {e}") from e
        debug_print(f"Loaded credentials from {self.path} (expiry={creds.expiry})")
        return creds

    def save(self, creds: Credentials):
        """Overwrite the token file with creds.

        A failed write is fatal: without a stored token every later run would
        have to go through the browser again.
        """
        record = json.loads(creds.to_json())
        record.setdefault('refresh_token', creds.refresh_token)
        record['token_type'] = 'Bearer'
        print(f"Saving credential file to: {self.path}")
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, 'w') as token_file:
                json.dump(record, token_file)
        except OSError as e:
            raise AuthError(f"Unable to cache oauth token: {e}") from e
