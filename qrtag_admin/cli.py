"""
Command-line interface for the QR Tag admin backend.

Talks to the upstream platform API directly through the same services the
web app uses. Set QRTAG_API_URL (and QRTAG_ADMIN_API_KEY or --token) first.
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from qrtag_admin.config import ApiConfig
from qrtag_admin.logging_config import setup_logging
from qrtag_admin.models.common import validation_message
from qrtag_admin.models.partner import AffiliatePartnerFilters
from qrtag_admin.models.sale import TagSaleFilters
from qrtag_admin.models.tag import GenerateBulkRequest, TagListFilters
from qrtag_admin.services.backend_client import BackendClient
from qrtag_admin.services.dashboard_service import DashboardService
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.services.partner_service import PartnerService
from qrtag_admin.services.sale_service import SaleService
from qrtag_admin.services.tag_service import TagService
from qrtag_admin.services.wallet_service import WalletService
from qrtag_admin.utils.formatting import display, format_count, format_currency, format_date_time
from qrtag_admin.workflows.activation import ActivationWizard
from qrtag_admin.workflows.listing import ListController


def fail(message: str) -> None:
    print(f"Error: {message}")
    sys.exit(1)


def print_pagination(pagination: Dict[str, Any]) -> None:
    print(
        f"\nPage {display(pagination.get('page'))} of {display(pagination.get('pages'))}"
        f" ({display(pagination.get('total'))} total)"
    )


def check_filters(model, filters: Dict[str, Any]) -> Dict[str, Any]:
    """Validate list filters before any request; exits on bad input."""
    try:
        model(**filters)
    except ValidationError as exc:
        fail(validation_message(exc))
    return filters


def run_list(controller: ListController) -> List[Any]:
    """Fetch one page through the list controller; exits on error."""
    if not controller.fetch():
        fail(controller.error or "Request failed")
    return controller.rows


def cmd_tags_list(client: BackendClient, args) -> None:
    service = TagService(client)
    controller = ListController(
        lambda filters: service.get_admin_tags(TagListFilters(**filters)),
        "tags",
        filters=check_filters(TagListFilters, {
            "status": args.status, "batch_name": args.batch, "search": args.search,
            "page": args.page, "limit": args.limit,
        }),
    )
    rows = run_list(controller)

    print(f"\n=== Tags ({args.status or 'all'}) ===\n")
    if not rows:
        print("  (No tags found)")
    for tag in rows:
        owner = tag.get("owner") or {}
        print(
            f"  {display(tag.get('shortCode')):<12} {display(tag.get('status')):<10} "
            f"{display(tag.get('batchName')):<16} {display(owner.get('fullName'))}"
        )
    print_pagination(controller.pagination)


def cmd_tags_generate(client: BackendClient, args) -> None:
    try:
        request = GenerateBulkRequest(count=args.count, batch_name=args.batch, assigned_to=args.assign_to)
    except ValidationError as exc:
        fail(validation_message(exc))
        return

    result = TagService(client).generate_bulk_tags(request)
    print(f"Generated {result['totalGenerated']} tag(s) in batch {display(result['batchName'])}")
    for tag in result["tags"]:
        print(f"  {display(tag.get('shortCode'))}  {display(tag.get('shortUrl'))}")


def cmd_tags_status(client: BackendClient, args) -> None:
    TagService(client).update_tag_status(args.short_code, args.status)
    print(f"Tag {args.short_code} set to {args.status}")


def cmd_tags_verify(client: BackendClient, args) -> None:
    tag = TagService(client).verify_tag_by_short_code(args.short_code)
    print(f"\n=== Tag {tag.short_code} ===\n")
    print(f"  Id: {tag.id}")
    print(f"  Status: {display(tag.status)}")
    print(f"  Batch: {display(tag.batch_name)}")
    print(f"  Owner: {display(tag.owner_full_name)} ({display(tag.owner_phone)})")
    print(f"  Vehicle: {display(tag.vehicle_number)} {display(tag.vehicle_type)}")
    print(f"  Assigned to: {display(tag.assigned_to)}")


def cmd_tags_activate(client: BackendClient, args) -> None:
    wizard = ActivationWizard(TagService(client), args.short_code)
    if not wizard.request_otp(args.phone):
        fail(wizard.notifier.last.message)
    print(wizard.notifier.last.message)
    if wizard.expires_at:
        print(f"OTP expires at {format_date_time(wizard.expires_at)}")

    otp = args.otp or wizard.prefilled_otp or input("OTP: ").strip()
    values = {
        "otp": otp,
        "fullName": args.full_name,
        "vehicleNumber": args.vehicle_number,
        "vehicleType": args.vehicle_type,
        "email": args.email,
        "city": args.city,
    }
    if not wizard.confirm(values):
        fail(wizard.notifier.last.message)
    print(wizard.notifier.last.message)


def cmd_partners_list(client: BackendClient, args) -> None:
    service = PartnerService(client)
    controller = ListController(
        lambda filters: service.get_affiliate_partners(AffiliatePartnerFilters(**filters)),
        "partners",
        filters=check_filters(AffiliatePartnerFilters, {
            "status": args.status, "search": args.search, "page": args.page, "limit": args.limit,
        }),
    )
    rows = run_list(controller)

    print("\n=== Affiliate Partners ===\n")
    if not rows:
        print("  (No partners found)")
    for partner in rows:
        print(
            f"  {display(partner.get('name')):<24} {display(partner.get('status')):<10} "
            f"{format_count(partner.get('cardsActivated'))} activated, "
            f"{format_currency(partner.get('totalSalesAmount'))} sales"
        )
    print_pagination(controller.pagination)


def cmd_partners_show(client: BackendClient, args) -> None:
    partner = PartnerService(client).get_affiliate_partner_by_id(args.partner_id)
    print(f"\n=== {display(partner['name'])} ===\n")
    print(f"  Email: {display(partner['email'])}")
    print(f"  Phone: {display(partner['phone'])}")
    print(f"  Company: {display(partner['companyName'])}")
    print(f"  Commission: {display(partner['commissionPercentage'])}%")
    print(f"  Status: {partner['status']}")
    print(f"  Cards activated: {format_count(partner['cardsActivated'])}")
    print(f"  Total sales: {format_currency(partner['totalSalesAmount'])}")
    print(f"  Commission earned: {format_currency(partner['totalCommissionEarned'])}")


def cmd_sales_list(client: BackendClient, args) -> None:
    service = SaleService(client)
    controller = ListController(
        lambda filters: service.get_tag_sales(TagSaleFilters(**filters)),
        "sales",
        filters=check_filters(TagSaleFilters, {
            "sale_type": args.sale_type, "payment_status": args.payment_status,
            "search": args.search, "page": args.page, "limit": args.limit,
        }),
    )
    rows = run_list(controller)

    print("\n=== Tag Sales ===\n")
    if not rows:
        print("  (No sales found)")
    for sale in rows:
        print(
            f"  {format_date_time(sale.get('saleDate')):<20} {display(sale.get('saleType')):<14} "
            f"{format_currency(sale.get('totalSaleAmount')):>12}  {display(sale.get('paymentStatus'))}"
        )
    print_pagination(controller.pagination)


def cmd_sales_show(client: BackendClient, args) -> None:
    sale = SaleService(client).get_tag_sale_by_id(args.sale_id)
    print(f"\n=== Sale {sale['_id']} ===\n")
    print(f"  Date: {format_date_time(sale['saleDate'])}")
    print(f"  Type: {display(sale['saleType'])}")
    print(f"  Sales person role: {display(sale['salesPersonRole'])}")
    print(f"  Total: {format_currency(sale['totalSaleAmount'])}")
    print(f"  Sales person commission: {format_currency(sale['commisionAmountOfSalesPerson'])}")
    print(f"  Owner commission: {format_currency(sale['commisionAmountOfOwner'])}")
    print(f"  Payment: {display(sale['paymentStatus'])}")
    print(f"  Verification: {display(sale['varificationStatus'])}")


def print_wallet(wallet: Dict[str, Any]) -> None:
    summary = wallet.get("summary") or {}
    print("\n=== Wallet ===\n")
    print(f"  Available balance: {format_currency(summary.get('availableBalance'))}")
    print(f"  Completed sales: {format_currency(summary.get('completedSales'))}")
    print(f"  Pending sales: {format_currency(summary.get('pendingSales'))}")
    print(f"  Withdrawn: {format_currency(summary.get('totalWithdrawn'))}")
    print(f"  Pending withdrawals: {format_currency(summary.get('pendingWithdrawals'))}")

    print("\n--- Transactions ---\n")
    if not wallet["transactions"]:
        print("  (No transactions)")
    for txn in wallet["transactions"]:
        sign = "-" if txn.get("type") == "debit" else "+"
        print(
            f"  {format_date_time(txn.get('createdAt')):<20} {sign}{format_currency(txn.get('amount')):<12} "
            f"{display(txn.get('status')):<10} {display(txn.get('description'))}"
        )


def cmd_wallet_me(client: BackendClient, args) -> None:
    print_wallet(WalletService(client).get_my_wallet(page=args.page))


def cmd_wallet_user(client: BackendClient, args) -> None:
    print_wallet(WalletService(client).get_user_wallet(args.user_id, page=args.page))


def cmd_dashboard(client: BackendClient, args) -> None:
    summary = DashboardService(client).get_admin_dashboard_summary()
    totals = summary["totals"]
    tags = totals.get("tags") or {}
    sales = totals.get("sales") or {}

    print("\n=== Dashboard ===\n")
    print(
        f"Tags: {format_count(tags.get('total'))} total, {format_count(tags.get('activated'))} activated, "
        f"{format_count(tags.get('generated'))} unassigned"
    )
    print(
        f"Sales: {format_count(sales.get('totalSales'))} sales, {format_currency(sales.get('totalRevenue'))} revenue, "
        f"today {format_currency(sales.get('revenueToday'))}"
    )

    print("\n--- Sales Channels ---\n")
    for channel in summary["salesChannels"]:
        print(f"  {display(channel.get('label')):<10} {format_count(channel.get('value')):>6}  {format_currency(channel.get('amount'))}")

    print("\n--- Top Affiliates ---\n")
    for leader in summary["affiliateLeaders"]:
        print(
            f"  {display(leader.get('name')):<20} {format_count(leader.get('activatedTags'))}/"
            f"{format_count(leader.get('totalTags'))} activated  {format_currency(leader.get('salesAmount'))}"
        )
    print()


def _add_paging(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default=None, help="Search text")
    parser.add_argument("--page", type=int, default=1, help="Page number")
    parser.add_argument("--limit", type=int, default=ApiConfig.DEFAULT_PAGE_SIZE, help="Rows per page")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrtag-admin",
        description="QR Tag admin CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--token", default=None, help="Authorization header sent upstream")
    parser.add_argument("--log-level", default=ApiConfig.LOG_LEVEL, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # tags
    tags = subparsers.add_parser("tags", help="QR tags")
    tags_sub = tags.add_subparsers(dest="action")

    tags_list = tags_sub.add_parser("list", help="List tags")
    tags_list.add_argument("--status", default=None, help="generated | assigned | activated | archived | all")
    tags_list.add_argument("--batch", default=None, help="Batch name")
    _add_paging(tags_list)
    tags_list.set_defaults(handler=cmd_tags_list)

    tags_generate = tags_sub.add_parser("generate", help="Generate a batch of tags")
    tags_generate.add_argument("--count", type=int, required=True, help="Number of tags (1-500)")
    tags_generate.add_argument("--batch", default=None, help="Batch name")
    tags_generate.add_argument("--assign-to", default=None, help="Affiliate id to assign the batch to")
    tags_generate.set_defaults(handler=cmd_tags_generate)

    tags_status = tags_sub.add_parser("status", help="Change a tag's status")
    tags_status.add_argument("short_code")
    tags_status.add_argument("status", help="generated | assigned | activated | archived")
    tags_status.set_defaults(handler=cmd_tags_status)

    tags_verify = tags_sub.add_parser("verify", help="Look up a tag by short code")
    tags_verify.add_argument("short_code")
    tags_verify.set_defaults(handler=cmd_tags_verify)

    tags_activate = tags_sub.add_parser("activate", help="Activate a tag (OTP flow)")
    tags_activate.add_argument("short_code")
    tags_activate.add_argument("--phone", required=True, help="Owner phone (10 digits)")
    tags_activate.add_argument("--full-name", required=True)
    tags_activate.add_argument("--vehicle-number", required=True)
    tags_activate.add_argument("--vehicle-type", required=True)
    tags_activate.add_argument("--email", default=None)
    tags_activate.add_argument("--city", default=None)
    tags_activate.add_argument("--otp", default=None, help="OTP; prompted for when omitted")
    tags_activate.set_defaults(handler=cmd_tags_activate)

    # partners
    partners = subparsers.add_parser("partners", help="Affiliate partners")
    partners_sub = partners.add_subparsers(dest="action")

    partners_list = partners_sub.add_parser("list", help="List partners")
    partners_list.add_argument("--status", default=None, help="active | inactive | suspended | all")
    _add_paging(partners_list)
    partners_list.set_defaults(handler=cmd_partners_list)

    partners_show = partners_sub.add_parser("show", help="Show one partner")
    partners_show.add_argument("partner_id")
    partners_show.set_defaults(handler=cmd_partners_show)

    # sales
    sales = subparsers.add_parser("sales", help="Tag sales")
    sales_sub = sales.add_subparsers(dest="action")

    sales_list = sales_sub.add_parser("list", help="List sales")
    sales_list.add_argument("--sale-type", default=None, help="online | offline | not-confirmed | all")
    sales_list.add_argument("--payment-status", default=None, help="pending | completed | cancelled | all")
    _add_paging(sales_list)
    sales_list.set_defaults(handler=cmd_sales_list)

    sales_show = sales_sub.add_parser("show", help="Show one sale")
    sales_show.add_argument("sale_id")
    sales_show.set_defaults(handler=cmd_sales_show)

    # wallet
    wallet = subparsers.add_parser("wallet", help="Commission wallets")
    wallet_sub = wallet.add_subparsers(dest="action")

    wallet_me = wallet_sub.add_parser("me", help="Your wallet")
    wallet_me.add_argument("--page", type=int, default=1)
    wallet_me.set_defaults(handler=cmd_wallet_me)

    wallet_user = wallet_sub.add_parser("user", help="Another user's wallet")
    wallet_user.add_argument("user_id")
    wallet_user.add_argument("--page", type=int, default=1)
    wallet_user.set_defaults(handler=cmd_wallet_user)

    # dashboard
    dashboard = subparsers.add_parser("dashboard", help="Dashboard summary")
    dashboard.set_defaults(handler=cmd_dashboard)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "handler", None):
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level)
    client = BackendClient(token=args.token)
    try:
        args.handler(client, args)
    except ServiceError as exc:
        fail(exc.message)
    finally:
        client.close()


if __name__ == "__main__":
    main()
