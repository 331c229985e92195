import argparse
import asyncio
import sys

import tabulate

# Local imports
import config # Ensure config is imported to allow modification of DEBUG_MODE
from config import CATEGORIES, CHUNK_SIZE, CLIENT_SECRET_PATH, MAX_CHUNK_SIZE, REDIRECT_PORT, TOKEN_PATH
from errors import ConfigError, PurgeError, UserAbort
from gmail_client import GmailClient
from oauth_flow import AuthorizationFlow
from purge import delete_all, list_all
from token_store import TokenStore
from utils import category_query, chunk, chunk_count

def print_categories():
    rows = [(number, name.capitalize()) for number, name in enumerate(CATEGORIES, 1)]
    print("Categories:")
    print(tabulate.tabulate(rows, headers=['#', 'Category'], tablefmt='psql'))

def prompt_category():
    """Show the category menu and return the chosen category name."""
    print_categories()
    choice = input("Enter category number to purge: ").strip()
    if not choice.isdigit() or not 1 <= int(choice) <= len(CATEGORIES):
        raise ConfigError("Invalid category number")
    return CATEGORIES[int(choice) - 1]

def confirm(question):
    """Ask a (Y/n) question. Only an exact 'Y' counts as yes."""
    return input(f"{question} (Y/n): ").strip() == 'Y'

async def authorize(args):
    token_store = TokenStore(args.token)
    flow = AuthorizationFlow(
        token_store,
        client_secret_path=args.creds,
        port=args.port,
        timeout=args.auth_timeout,
    )
    return await flow.get_credentials()

async def handle_auth_command(args):
    await authorize(args)
    print(f"Authorized. Token stored in {args.token}")

async def handle_purge_command(args):
    if not 1 <= args.chunk_size <= MAX_CHUNK_SIZE:
        raise ConfigError(f"--chunk-size must be between 1 and {MAX_CHUNK_SIZE}")

    creds = await authorize(args)
    gmail = GmailClient(creds)
    gmail.connect()

    category = args.category or prompt_category()
    if not confirm(f"Are you sure you want to purge all messages in {category}?"):
        raise UserAbort()

    message_ids = await list_all(gmail, category_query(category))
    if not message_ids:
        print(f"No messages found in {category}.")
        return

    if args.dry_run:
        print(f"Dry run: {len(message_ids)} messages in {category} would be deleted "
              f"in {chunk_count(len(message_ids), args.chunk_size)} batch(es).")
        return

    if not confirm(f"Are you sure you want to delete {len(message_ids)} messages?"):
        raise UserAbort()

    deleted = await delete_all(gmail, chunk(message_ids, args.chunk_size))
    print(f"Deleted {deleted} messages")

async def main():
    parser = argparse.ArgumentParser(description='Permanently delete every Gmail message in an inbox category.')
    parser.add_argument('--creds', default=CLIENT_SECRET_PATH, help='Path to OAuth2 client secrets JSON (e.g., credentials.json).')
    parser.add_argument('--token', default=TOKEN_PATH, help='Path where the OAuth2 token is cached.')
    parser.add_argument('--port', type=int, default=REDIRECT_PORT, help='Local port receiving the OAuth2 redirect.')
    parser.add_argument('--auth-timeout', type=float, default=config.AUTH_TIMEOUT, help='Seconds to wait for the browser redirect (default: wait forever).')
    parser.add_argument('--debug', action='store_true', help='Enable detailed debug output.')

    subparsers = parser.add_subparsers(title='commands', dest='command', required=True, help='Available commands')

    # --- Auth Command ---
    subparsers.add_parser('auth', help='Run the OAuth2 flow and cache the token without touching mail.')

    # --- Purge Command ---
    purge_parser = subparsers.add_parser('purge', help='Delete all messages in a category.')
    purge_parser.add_argument('--category', choices=CATEGORIES, help='Category to purge (prompted for if omitted).')
    purge_parser.add_argument('--chunk-size', type=int, default=CHUNK_SIZE, help=f'Message ids per batch delete call (default: {CHUNK_SIZE}).')
    purge_parser.add_argument('--dry-run', action='store_true', help='List and count matching messages without deleting them.')

    args = parser.parse_args()

    if args.debug:
        config.DEBUG_MODE = True # Set DEBUG_MODE in the config module
        print("Debug mode enabled (via config.DEBUG_MODE).")
        print(f"Parsed arguments: {args}")

    try:
        if args.command == 'auth':
            await handle_auth_command(args)
        elif args.command == 'purge':
            await handle_purge_command(args)
        else:
            parser.print_help()
    except UserAbort:
        print("Exiting...")
        sys.exit(1)
    except PurgeError as e:
        sys.exit(f"{e.stage.capitalize()} failed: {e}")

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nProgram terminated by user.")
        sys.exit(130)

if __name__ == '__main__':
    run()
