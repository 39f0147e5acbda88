#!/usr/bin/env python
"""
Create the Stripe product and prices for the premium purchase.

Creates "Privacy Interceptor Premium" with a standard price and an
"Early Bird" price, then prints the STRIPE_PRICE_ID line to put in .env.

Usage:
    python setup_stripe.py
    python setup_stripe.py --currency usd --standard 499 --early-bird 199
"""

import argparse
import sys
from dataclasses import dataclass

import stripe
from rich.console import Console

from shared.config import get_settings

console = Console()

PRODUCT_NAME = "Privacy Interceptor Premium"
PRODUCT_DESCRIPTION = (
    "Lifetime access to all premium privacy features, "
    "including unlimited OCR and advanced redaction."
)


@dataclass(frozen=True)
class CreatedPrices:
    """IDs of the objects created in Stripe."""

    product_id: str
    standard_price_id: str
    early_bird_price_id: str


def create_catalog(
    api_key: str,
    currency: str,
    standard_amount: int,
    early_bird_amount: int,
) -> CreatedPrices:
    """
    Create the product and its two one-time prices.

    Amounts are in the currency's minor unit (cents).
    """
    product = stripe.Product.create(
        api_key=api_key,
        name=PRODUCT_NAME,
        description=PRODUCT_DESCRIPTION,
    )
    console.print(f"[green]✓[/green] Product created: {product.name} ({product.id})")

    standard = stripe.Price.create(
        api_key=api_key,
        product=product.id,
        unit_amount=standard_amount,
        currency=currency,
    )
    console.print(f"[green]✓[/green] Standard price created: {standard_amount} {currency} ({standard.id})")

    early_bird = stripe.Price.create(
        api_key=api_key,
        product=product.id,
        unit_amount=early_bird_amount,
        currency=currency,
        nickname="Early Bird",
    )
    console.print(f"[green]✓[/green] Early Bird price created: {early_bird_amount} {currency} ({early_bird.id})")

    return CreatedPrices(
        product_id=product.id,
        standard_price_id=standard.id,
        early_bird_price_id=early_bird.id,
    )


def main():
    parser = argparse.ArgumentParser(description="Create Stripe product and prices")
    parser.add_argument("--currency", default="eur", help="Price currency (default: eur)")
    parser.add_argument("--standard", type=int, default=299, help="Standard price in cents")
    parser.add_argument("--early-bird", type=int, default=99, help="Early Bird price in cents")
    args = parser.parse_args()

    api_key = get_settings().stripe_secret_key.strip()
    if not api_key:
        console.print("[red]Error:[/red] STRIPE_SECRET_KEY not found in environment or .env")
        sys.exit(1)

    console.print(f"Creating [bold]{PRODUCT_NAME}[/bold]...")
    try:
        created = create_catalog(api_key, args.currency, args.standard, args.early_bird)
    except stripe.StripeError as e:
        console.print(f"[red]Stripe setup failed:[/red] {e}")
        sys.exit(1)

    console.print()
    console.print("[bold]Setup complete.[/bold] To use the Early Bird price, add this to .env:")
    console.print(f"  STRIPE_PRICE_ID={created.early_bird_price_id}")
    console.print("To switch to the standard price later, use:")
    console.print(f"  STRIPE_PRICE_ID={created.standard_price_id}")


if __name__ == "__main__":
    main()
