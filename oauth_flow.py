import asyncio
import threading
import webbrowser
import wsgiref.simple_server
from urllib.parse import parse_qs

import requests
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

# Import constants from config.py
from config import (
    AUTH_TIMEOUT,
    CLIENT_SECRET_PATH,
    REDIRECT_HOST,
    REDIRECT_PATH,
    REDIRECT_PORT,
    REDIRECT_RESPONSE_BODY,
    SCOPES,
    STATE_TOKEN,
)
from errors import AuthError, ConfigError, ListenerError, TokenNotFound
from token_store import TokenStore
from utils import debug_print

class _QuietRequestHandler(wsgiref.simple_server.WSGIRequestHandler):
    def log_message(self, format, *args):
        debug_print(f"Redirect listener: {format % args}")

class RedirectListener:
    """One-shot HTTP server that captures the OAuth2 redirect.

    The server runs on its own thread. The first GET to `path` fills a
    single-slot asyncio future with the query parameters; later requests are
    answered but ignored.
    """

    def __init__(self, host=REDIRECT_HOST, port=REDIRECT_PORT, path=REDIRECT_PATH):
        self.host = host
        self.port = port
        self.path = path
        self.params_future = None
        self._server = None
        self._thread = None
        self._loop = None

    @property
    def redirect_uri(self):
        return f"http://{self.host}:{self.port}{self.path}"

    @property
    def is_running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> asyncio.Future:
        """Bind the port and start serving. Must be called from the event loop."""
        self._loop = asyncio.get_running_loop()
        self.params_future = self._loop.create_future()
        try:
            self._server = wsgiref.simple_server.make_server(
                self.host, self.port, self._app, handler_class=_QuietRequestHandler
            )
        except OSError as e:
            raise ListenerError(f"Unable to listen on {self.host}:{self.port}: {e}") from e
        # Port 0 asks the OS for a free port; report the real one from here on.
        self.port = self._server.server_port
        self._thread = threading.Thread(target=self._serve, name='oauth-redirect-listener', daemon=True)
        self._thread.start()
        debug_print(f"Redirect listener started on {self.redirect_uri}")
        return self.params_future

    def _serve(self):
        try:
            self._server.serve_forever()
        finally:
            self._loop.call_soon_threadsafe(self._on_server_exit)

    def _on_server_exit(self):
        if not self.params_future.done():
            self.params_future.set_exception(
                ListenerError("Redirect listener stopped before an authorization code arrived")
            )

    def _deliver(self, params):
        if not self.params_future.done():
            self.params_future.set_result(params)

    def _app(self, environ, start_response):
        if environ.get('PATH_INFO') != self.path or environ.get('REQUEST_METHOD') != 'GET':
            start_response('404 Not Found', [('Content-type', 'text/plain; charset=utf-8')])
            return [b'Not Found']
        params = {key: values[0] for key, values in parse_qs(environ.get('QUERY_STRING', '')).items()}
        self._loop.call_soon_threadsafe(self._deliver, params)
        start_response('200 OK', [('Content-type', 'text/plain; charset=utf-8')])
        return [REDIRECT_RESPONSE_BODY.encode('utf-8')]

    async def stop(self):
        """Shut the server down and wait for its thread to finish."""
        if self._server is None:
            return
        if not self.params_future.done():
            self.params_future.cancel()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._server.shutdown)
        await loop.run_in_executor(None, self._thread.join)
        self._server.server_close()
        self._server = None
        debug_print("Redirect listener stopped.")

def open_browser(url):
    """Open url in the user's default browser. Returns False if no browser could be launched."""
    try:
        return webbrowser.open(url)
    except webbrowser.Error as e:
        debug_print(f"webbrowser failed: {e}")
        return False

class AuthorizationFlow:
    def __init__(self, token_store: TokenStore, client_secret_path=CLIENT_SECRET_PATH, scopes=SCOPES,
                 host=REDIRECT_HOST, port=REDIRECT_PORT, path=REDIRECT_PATH,
                 state=STATE_TOKEN, timeout=AUTH_TIMEOUT):
        self.token_store = token_store
        self.client_secret_path = client_secret_path
        self.scopes = scopes
        self.host = host
        self.port = port
        self.path = path
        self.state = state
        self.timeout = timeout
        self.listener = None

    async def get_credentials(self) -> Credentials:
        """Return usable credentials, from the token file if possible, else via the browser."""
        creds = await self._load_cached()
        if creds:
            return creds

        print("No valid credentials, attempting to authenticate...")
        creds = await self.run_local_server()
        print("Authentication successful.")
        self.token_store.save(creds)
        return creds

    async def _load_cached(self):
        try:
            creds = self.token_store.load()
        except TokenNotFound as e:
            debug_print(f"{e}. Will authenticate in the browser.")
            return None

        if creds.valid:
            return creds
        if not creds.refresh_token:
            debug_print("Stored token has expired and carries no refresh token.")
            return None

        print("Credentials expired. Refreshing token...")
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, creds.refresh, Request())
        except RefreshError as e:
            raise AuthError(f"Unable to refresh token: {e}") from e
        print("Token refreshed successfully.")
        self.token_store.save(creds)
        return creds

    def _build_flow(self):
        try:
            return InstalledAppFlow.from_client_secrets_file(self.client_secret_path, self.scopes)
        except FileNotFoundError as e:
            raise ConfigError(
                f"Client secret file not found at '{self.client_secret_path}'. "
                "Download it from the Google Cloud Console."
            ) from e
        except (OSError, ValueError) as e:
            raise ConfigError(f"Unable to parse client secret file '{self.client_secret_path}': {e}") from e

    async def run_local_server(self) -> Credentials:
        """Run the browser consent round-trip and exchange the returned code."""
        flow = self._build_flow()

        # The listener has to be up before the browser can land on it.
        self.listener = RedirectListener(self.host, self.port, self.path)
        params_future = self.listener.start()
        try:
            flow.redirect_uri = self.listener.redirect_uri
            auth_url, _ = flow.authorization_url(access_type='offline', state=self.state, prompt='consent')
            print(f"Please visit this URL to authorize this application: {auth_url}")
            if not open_browser(auth_url):
                raise AuthError("Unable to open a web browser for authorization")

            try:
                params = await asyncio.wait_for(params_future, self.timeout)
            except asyncio.TimeoutError as e:
                raise AuthError(f"No authorization redirect received within {self.timeout} seconds") from e

            code = self._extract_code(params)
            return await asyncio.get_running_loop().run_in_executor(None, self._exchange, flow, code)
        finally:
            await self.listener.stop()

    def _extract_code(self, params):
        if 'error' in params:
            raise AuthError(f"Authorization was refused: {params['error']}")
        if 'state' in params and params['state'] != self.state:
            raise AuthError("State token in the redirect does not match the request")
        code = params.get('code')
        if not code:
            raise AuthError("Redirect did not carry an authorization code")
        return code

    def _exchange(self, flow, code):
        debug_print("Exchanging authorization code for a token...")
        try:
            flow.fetch_token(code=code)
        except (OAuth2Error, requests.RequestException, ValueError) as e:
            raise AuthError(f"Unable to retrieve token from web: {e}") from e
        return flow.credentials
