#!/usr/bin/env python3

import argparse
import json
import logging
import sys
from pathlib import Path

from menu_packager.config import Settings
from menu_packager.errors import MenuPackagerError
from menu_packager.extractors.menu_file_extractor import MenuFileExtractor
from menu_packager.models.menu_models import AudienceType
from menu_packager.parsers.llm_parser import PackageSelector
from menu_packager.service import DEFAULT_DISCOUNT, build_menu_data, generate_package
from menu_packager.utils.clean_text import to_menu_lines

logger = logging.getLogger(__name__)


# ============================================================
# STEPS
# ============================================================

def load_menu(file_path: str, settings: Settings, loose: bool = False):
    print(" STEP 1: Extracting menu items")
    print("-" * 70)

    extractor = MenuFileExtractor(settings)
    text = extractor.extract(file_path)
    if loose:
        text = to_menu_lines(text)

    menu_data = build_menu_data(text, Path(file_path).name, settings)
    print(f" Extracted {menu_data.total_items} menu items (currency: {menu_data.currency})\n")
    return menu_data


def print_menu(menu_data):
    print(" MENU")
    print("=" * 70)
    if not menu_data.items:
        print(" No menu items found")
    for item in menu_data.items:
        print(f" {item.name:<55} {item.price:>12}")
    print("=" * 70 + "\n")


def print_package(package):
    label = package.audience_type.profile.label
    print(f" YOUR {label.upper()} PACKAGE")
    print("=" * 70)
    for title, items in (("Starters", package.starters), ("Main Courses", package.mains), ("Desserts", package.desserts)):
        print(f" {title}")
        for item in items:
            print(f"   {item.name:<53} {item.price:>12}")
    print("-" * 70)
    print(f" Package Price: {package.package_price}")
    if package.total_savings:
        print(f" Save {package.total_savings} compared to ordering items separately")
    print("=" * 70 + "\n")


# ============================================================
# COMMANDS
# ============================================================

def cmd_extract(args, settings: Settings):
    menu_data = load_menu(args.input, settings, loose=args.loose)
    print_menu(menu_data)

    if args.csv:
        df = menu_data.to_dataframe()
        df.to_csv(args.csv, index=False)
        print(f" ✅ Saved CSV: {args.csv} ({len(df)} rows)")


def cmd_package(args, settings: Settings):
    menu_data = load_menu(args.input, settings, loose=args.loose)

    print(f" STEP 2: Generating {args.audience} package ({args.discount}% off)")
    print("-" * 70)

    selector = PackageSelector(settings)
    package = generate_package(menu_data.items, args.audience, args.discount, selector, settings)
    print_package(package)

    payload = json.dumps(package.to_json_dict(), indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        print(f" ✅ Saved package: {args.output}")
    else:
        print(payload)


def cmd_check_env(args, settings: Settings):
    print(json.dumps({"status": "ok", "environment": settings.describe()}, indent=2, ensure_ascii=False))


# ============================================================
# MAIN
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build discounted meal packages from a restaurant menu")
    parser.add_argument("--env-file", help="Path to a .env file (default: search from the working directory)")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Extract menu items from a PDF, image or text file")
    extract.add_argument("input", help="Menu file")
    extract.add_argument("--csv", help="Write the parsed items to this CSV file")
    extract.add_argument("--loose", action="store_true", help="Reformat loosely formatted text lines first")
    extract.set_defaults(func=cmd_extract)

    package = sub.add_parser("package", help="Generate a discounted package from a menu")
    package.add_argument("input", help="Menu file")
    package.add_argument("--audience", default=AudienceType.ADULT.value, choices=[a.value for a in AudienceType])
    package.add_argument("--discount", type=float, default=DEFAULT_DISCOUNT, help="Discount percentage (0-100)")
    package.add_argument("--output", help="Write the package JSON to this file")
    package.add_argument("--loose", action="store_true", help="Reformat loosely formatted text lines first")
    package.set_defaults(func=cmd_package)

    check_env = sub.add_parser("check-env", help="Show the AI configuration with secrets masked")
    check_env.set_defaults(func=cmd_check_env)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = Settings.from_env(args.env_file)
        args.func(args, settings)
    except (MenuPackagerError, FileNotFoundError) as e:
        logger.error(f"❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
