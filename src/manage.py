"""Pre-orders management CLI.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py create-admin --account admin --shop-name "Bakery HQ"
"""

import argparse
import sys


def _initialized_domain():
    from preorders.domain import preorders

    preorders.init()
    return preorders


def setup_database():
    from preorders.utils.db import setup_db

    print("Creating pre-orders database schema...")
    setup_db(_initialized_domain())
    print("Done.")


def drop_database():
    from preorders.utils.db import drop_db

    print("Dropping pre-orders database schema...")
    drop_db(_initialized_domain())
    print("Done.")


def create_admin(account_name, shop_name, phone=None, address=None):
    """Register the bakery's admin account, the first account of a new install."""
    from preorders.shop.registration import RegisterShop
    from preorders.shop.shop import Role

    domain = _initialized_domain()
    with domain.domain_context():
        shop_id = domain.process(
            RegisterShop(
                account_name=account_name,
                shop_name=shop_name,
                role=Role.ADMIN.value,
                phone=phone,
                address=address,
            ),
            asynchronous=False,
        )
    print(f"Admin account {account_name!r} registered with id {shop_id}.")


def main():
    parser = argparse.ArgumentParser(description="Pre-orders management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Register an admin account")
    admin_parser.add_argument("--account", required=True, help="Login account name")
    admin_parser.add_argument("--shop-name", required=True, help="Display name")
    admin_parser.add_argument("--phone")
    admin_parser.add_argument("--address")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.account, args.shop_name, phone=args.phone, address=args.address)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
