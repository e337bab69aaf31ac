"""Command-line host for the Broke-Again dashboard."""
import argparse
import sys
from datetime import datetime
from decimal import Decimal

from brokeagain.config import ConfigManager, get_settings
from brokeagain.dashboard import BudgetSession, DashboardSnapshot
from brokeagain.expenses.models import Category
from brokeagain.llm import ReceiptExtractor, SpendingAdvisor, create_client
from brokeagain.storage import BudgetRepository, SQLiteStore
from brokeagain.utils.exceptions import BrokeAgainError
from brokeagain.utils.logger import configure_logging
from brokeagain.utils.paths import app_data_dir


def build_session() -> BudgetSession:
    """Wire storage, optional LLM collaborators and the session."""
    settings = get_settings()
    config_manager = ConfigManager()
    config = config_manager.load_config()

    is_valid, message = config_manager.validate_config(config)
    if not is_valid:
        raise BrokeAgainError(f"Invalid configuration: {message}")

    logger = configure_logging(config.log_level, settings.log_max_file_size_mb, settings.log_backup_count)
    logger.info(message)

    extractor = advisor = None
    if config.llm_enabled:
        client = create_client(config.gemini_api_key)
        extractor = ReceiptExtractor(client, settings)
        advisor = SpendingAdvisor(client, settings)

    default_limit = (
        Decimal(str(config.budget_limit)) if config.budget_limit else settings.default_budget_limit
    )
    store = SQLiteStore(app_data_dir() / settings.database_file)
    session = BudgetSession(BudgetRepository(store), extractor, advisor, default_limit=default_limit)
    session.load()
    return session


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def print_summary(snapshot: DashboardSnapshot) -> None:
    metrics = snapshot.metrics
    budget = snapshot.budget

    print(f"\n{'Total':<14} {_money(metrics.total)}")
    print(f"{'This Month':<14} {_money(metrics.this_month)}")
    print(f"{'This Week':<14} {_money(metrics.last_week)}")
    print(f"{'Budget Left':<14} {_money(budget.remaining)} ({budget.percentage:.1f}% used, {budget.level.value})")

    forecast = snapshot.forecast
    if forecast:
        print("\nForecast")
        print("-" * 40)
        print(f"{'Daily':<14} {_money(forecast.daily_average)}")
        print(f"{'Next 30 days':<14} {_money(forecast.monthly_prediction)}")
        print(f"{'Trend':<14} {forecast.trend.value}")
        print(f"{'Confidence':<14} {forecast.confidence}%")

    if snapshot.category_shares:
        print("\nBy category")
        print("-" * 40)
        for share in snapshot.category_shares:
            print(f"{share.category.value:<16} {_money(share.amount):>12} {share.percentage:6.1f}%")

    for suggestion in snapshot.suggestions:
        print(f"\n{suggestion.category.value} ({suggestion.percentage}%)")
        print(f"  {suggestion.tip}")


def print_analytics(snapshot: DashboardSnapshot) -> None:
    monthly = snapshot.monthly
    if not monthly.months:
        print("No expenses yet")
        return

    print(f"\n{'Highest Month':<16} {_money(monthly.highest_month)}")
    print(f"{'Average Month':<16} {_money(monthly.average_month)}")
    print(f"{'Total Expenses':<16} {monthly.expense_count}")
    print("\nMonthly Trend")
    print("-" * 40)
    for month in monthly.months:
        print(f"{month.month:<10} {_money(month.total):>12} ({month.count} expenses)")


def upload_command(session: BudgetSession, image_path: str, assume_yes: bool) -> None:
    result = session.upload_receipt(image_path)

    print("\nExtracted Expenses")
    print("-" * 60)
    for expense in result.expenses:
        print(f"{expense.description:<40} {expense.category.value:<15} {_money(expense.amount)}")
    if result.rejected:
        print(f"\n{len(result.rejected)} items skipped")

    if not assume_yes and input("\nAdd all? [y/N] ").strip().lower() != "y":
        print("Cancelled")
        return

    added = session.add_extracted(result.expenses)
    print(f"✓ Added {added} expenses!")


def main():
    """Main entry point for the Broke-Again CLI."""
    parser = argparse.ArgumentParser(description="Broke-Again budget dashboard")
    subparsers = parser.add_subparsers(dest="command")

    summary = subparsers.add_parser("summary", help="Show metrics and forecast (default)")
    summary.add_argument("--tips", action="store_true", help="Include AI saving tips")

    add = subparsers.add_parser("add", help="Add an expense")
    add.add_argument("amount", help="Positive amount")
    add.add_argument("--category", choices=[c.value for c in Category], default=Category.FOOD.value)
    add.add_argument("--description", default="")
    add.add_argument("--date", help="YYYY-MM-DD (default: now)")

    upload = subparsers.add_parser("upload", help="Extract expenses from a receipt image")
    upload.add_argument("image")
    upload.add_argument("--yes", action="store_true", help="Add without confirmation")

    subparsers.add_parser("analytics", help="Show monthly breakdown")
    subparsers.add_parser("tips", help="Show AI saving tips")

    set_budget = subparsers.add_parser("set-budget", help="Set the monthly budget")
    set_budget.add_argument("limit")

    clear = subparsers.add_parser("clear", help="Clear all budget data")
    clear.add_argument("--yes", action="store_true", help="Skip confirmation")

    args = parser.parse_args()
    command = args.command or "summary"

    try:
        session = build_session()

        if command == "summary":
            print_summary(session.snapshot(with_suggestions=getattr(args, "tips", False)))
        elif command == "add":
            date = datetime.strptime(args.date, "%Y-%m-%d") if args.date else None
            expense = session.add_expense(args.amount, args.category, args.description, date=date)
            print(f"✓ Added {expense.category.value} expense of {_money(expense.amount)}")
        elif command == "upload":
            upload_command(session, args.image, args.yes)
        elif command == "analytics":
            print_analytics(session.snapshot())
        elif command == "tips":
            if session.advisor is None:
                print("Set GEMINI_API_KEY to enable saving tips.")
                return
            for suggestion in session.snapshot(with_suggestions=True).suggestions:
                print(f"\n{suggestion.category.value} ({suggestion.percentage}%)")
                print(f"  {suggestion.tip}")
        elif command == "set-budget":
            limit = session.set_budget_limit(args.limit)
            print(f"✓ Budget saved: {_money(limit)}")
        elif command == "clear":
            if not args.yes and input("Clear all budget data? This cannot be undone. [y/N] ").strip().lower() != "y":
                print("Cancelled")
                return
            session.clear()
            print("✓ All data cleared!")
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(2)
    except BrokeAgainError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
