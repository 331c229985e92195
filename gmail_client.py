import asyncio

import httplib2
from google.auth.exceptions import RefreshError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

# Import constants from config.py
from config import PAGE_SIZE, USER_ID
from errors import AuthError, NetworkError
from utils import debug_print

class GmailClient:
    def __init__(self, creds, user_id=USER_ID):
        self.creds = creds
        self.user_id = user_id
        self.service = None

    def connect(self):
        """Build the Gmail API service bound to the credentials.

        The underlying http object refreshes the access token by itself when it expires.
        """
        print("Connecting to the Gmail API...")
        self.service = build('gmail', 'v1', credentials=self.creds, cache_discovery=False)
        return self.service

    async def _execute(self, request, stage):
        """Run a prepared API request once, off the event loop."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, request.execute)
        except RefreshError as e:
            raise AuthError(f"Unable to refresh token: {e}", stage=stage) from e
        except HttpError as e:
            raise NetworkError(f"Gmail API returned {e.resp.status}: {e.reason}", stage=stage) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise NetworkError(f"Unable to reach the Gmail API: {e}", stage=stage) from e

    async def list_page(self, query, page_token=None, max_results=PAGE_SIZE):
        """Fetch one page of message ids matching query.

        Returns (ids, next_page_token); next_page_token is None once the listing is exhausted.
        """
        request = self.service.users().messages().list(
            userId=self.user_id, q=query, maxResults=max_results, pageToken=page_token
        )
        response = await self._execute(request, 'listing')
        ids = [message['id'] for message in response.get('messages', [])]
        next_page_token = response.get('nextPageToken') or None
        debug_print(f"Listed {len(ids)} messages for '{query}' (next page: {next_page_token})")
        return ids, next_page_token

    async def batch_delete(self, ids):
        """Permanently delete the given messages in one call. Not recoverable from Trash."""
        request = self.service.users().messages().batchDelete(userId=self.user_id, body={'ids': list(ids)})
        await self._execute(request, 'deletion')
        debug_print(f"Deleted batch of {len(ids)} messages")
