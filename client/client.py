"""
命令行客户端 - 对应网页端的登录/创建存储表单和文件管理器
"""
import argparse
import sys

import requests

from client.api.auth_api import AuthAPI
from client.api.base import ApiError, NetworkError
from client.api.storage_api import StorageAPI
from client.config import Config
from client.local.demo_store import DemoError
from client.utils.format import format_date, format_file_size


class CloudStoreClient:
    """认证与存储 API 共用一个 requests.Session，token cookie 自动随请求发送"""

    def __init__(self, base_url=None):
        self.base_url = base_url or Config.BASE_URL
        self.session = requests.Session()
        self.auth = AuthAPI(self.base_url, session=self.session)
        self.storage = StorageAPI(self.base_url, session=self.session, demo_store=self.auth.demo_store)
        self.auth.load_session()

    def print_listing(self, folder_id=None):
        listing = self.storage.list_folder(folder_id)
        folders, files = listing["folders"], listing["files"]
        header = f"[{listing['folder']['name']}] {listing['folder']['path']}"
        print(header + (" (Demo Mode)" if listing.get("demo") else ""))
        if not folders and not files:
            print("  (empty)")
            return
        for folder in folders:
            print(f"  d  {folder['id']}  {folder['name']:<30} {'—':>10}  {format_date(folder.get('modified'))}")
        for f in files:
            print(f"  -  {f['id']}  {f['name']:<30} {format_file_size(f.get('size')):>10}  {format_date(f.get('modified'))}")


def build_parser():
    parser = argparse.ArgumentParser(description="Cloud storage client")
    parser.add_argument("--base-url", default=Config.BASE_URL, help="Backend API base url")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("create", "login"):
        p = sub.add_parser(name)
        p.add_argument("--storage-id", required=True, help="Storage ID")
        p.add_argument("--password", required=True, help="Password")

    sub.add_parser("verify")
    sub.add_parser("logout")

    p = sub.add_parser("ls")
    p.add_argument("--folder", default=None, help="Folder id (default: root)")

    p = sub.add_parser("upload")
    p.add_argument("path", help="Local file")
    p.add_argument("--folder", default=None, help="Target folder id")

    p = sub.add_parser("mkdir")
    p.add_argument("name")
    p.add_argument("--folder", default=None, help="Parent folder id")

    p = sub.add_parser("rename")
    p.add_argument("type", choices=("file", "folder"))
    p.add_argument("id")
    p.add_argument("new_name")

    p = sub.add_parser("rm")
    p.add_argument("type", choices=("file", "folder"))
    p.add_argument("id")

    p = sub.add_parser("download")
    p.add_argument("id", help="File id")
    p.add_argument("save_path", nargs="?", default=".")
    return parser


def run(args, cli):
    if args.command == "create":
        print(cli.auth.create(args.storage_id, args.password)["message"])
    elif args.command == "login":
        print(cli.auth.login(args.storage_id, args.password)["message"])
    elif args.command == "verify":
        print(f"Authenticated as {cli.auth.verify()['storageId']}")
    elif args.command == "logout":
        print(cli.auth.logout()["message"])
    elif args.command == "ls":
        cli.print_listing(args.folder)
    elif args.command == "upload":
        result = cli.storage.upload(args.path, args.folder)
        print(f"Uploaded {result['file']['name']} ({format_file_size(result['file']['size'])})")
    elif args.command == "mkdir":
        folder = cli.storage.mkdir(args.name, args.folder)["folder"]
        print(f'Folder "{folder["name"]}" created ({folder["id"]})')
    elif args.command == "rename":
        cli.storage.rename(args.type, args.id, args.new_name)
        print(f'Renamed to "{args.new_name}"')
    elif args.command == "rm":
        cli.storage.delete(args.type, args.id)
        print(f"Deleted {args.type} {args.id}")
    elif args.command == "download":
        print(f"Saved {cli.storage.download(args.id, args.save_path)}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    cli = CloudStoreClient(base_url=args.base_url)
    try:
        run(args, cli)
    except ApiError as e:
        if e.status == 401 and args.command not in ("create", "login"):
            print("Session expired. Please login again.", file=sys.stderr)
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except NetworkError:
        print("Network error. Please check your connection.", file=sys.stderr)
        return 1
    except (DemoError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
