from tqdm import tqdm

# Local imports
from config import PAGE_SIZE
from errors import DeletionError, PurgeError
from gmail_client import GmailClient
from utils import debug_print

async def list_all(client: GmailClient, query, page_size=PAGE_SIZE):
    """Collect every message id matching query, following page tokens until exhausted.

    Any failed page aborts the listing; nothing gathered so far is returned.
    """
    message_ids = []
    page_token = None
    pages = 0
    while True:
        page_ids, page_token = await client.list_page(query, page_token, page_size)
        message_ids.extend(page_ids)
        pages += 1
        debug_print(f"Page {pages}: {len(page_ids)} ids, {len(message_ids)} total")
        if not page_token:
            break
    print(f"Found {len(message_ids)} messages matching '{query}' across {pages} page(s).")
    return message_ids

async def delete_all(client: GmailClient, chunks):
    """Delete each chunk with one batch call, in order. Returns the number of messages deleted.

    Stops at the first failing chunk and raises DeletionError. Chunks deleted before
    the failure are not restored.
    """
    chunks = list(chunks)
    total = sum(len(c) for c in chunks)
    deleted = 0
    with tqdm(total=total, desc="Deleting", unit="msg") as pbar:
        for index, ids in enumerate(chunks):
            try:
                await client.batch_delete(ids)
            except PurgeError as e:
                raise DeletionError(e, deleted, index, len(chunks)) from e
            deleted += len(ids)
            pbar.update(len(ids))
    return deleted
