"""Built-in event table: event key -> sound asset and spoken message."""

from __future__ import annotations

from typing import Mapping

from webhook_speaker.models import DEFAULT_EVENT, EventSound

EVENT_SOUNDS: dict[str, EventSound] = {
    # Sales
    "sale": EventSound("cash-register.mp3", "Cha-ching! New sale!"),
    "new_sale": EventSound("cash-register.mp3", "Cha-ching! New sale!"),
    "order": EventSound("cash-register.mp3", "You have a new order!"),
    "new_order": EventSound("cash-register.mp3", "You have a new order!"),
    "shopify.orders.create": EventSound("cash-register.mp3", "New Shopify order!"),
    "woocommerce.order.created": EventSound("cash-register.mp3", "New WooCommerce order!"),
    "gumroad.sale": EventSound("cash-register.mp3", "New Gumroad sale!"),
    # Payments
    "payment": EventSound("coins.mp3", "Payment received!"),
    "payment_received": EventSound("coins.mp3", "Payment received!"),
    "stripe.payment_intent.succeeded": EventSound("cash-register.mp3", "Stripe payment received!"),
    "stripe.charge.succeeded": EventSound("cash-register.mp3", "Stripe charge succeeded!"),
    "stripe.invoice.paid": EventSound("coins.mp3", "Invoice paid!"),
    "paypal.payment.completed": EventSound("coins.mp3", "PayPal payment received!"),
    "subscription": EventSound("level-up.mp3", "New subscription!"),
    "new_subscriber": EventSound("level-up.mp3", "New subscriber!"),
    "refund": EventSound("sad-trombone.mp3", "A refund was issued."),
    # Leads and forms
    "lead": EventSound("ding.mp3", "New lead!"),
    "new_lead": EventSound("ding.mp3", "New lead!"),
    "form": EventSound("chime.mp3", "New form submission!"),
    "form_submission": EventSound("chime.mp3", "New form submission!"),
    "typeform.form_response": EventSound("chime.mp3", "New Typeform response!"),
    "signup": EventSound("ding.mp3", "New signup!"),
    "booking": EventSound("chime.mp3", "New booking!"),
    # Physical world
    "doorbell": EventSound("doorbell.mp3", "Someone is at the door!"),
    "ring.doorbell": EventSound("doorbell.mp3", "Someone is at the door!"),
    "motion": EventSound("alert.mp3", "Motion detected!"),
    # Ops
    "alert": EventSound("alarm.mp3", "Alert! Something needs your attention."),
    "deploy": EventSound("rocket.mp3", "Deployment complete!"),
    "github.push": EventSound("ding.mp3", "New push to GitHub!"),
    "custom": EventSound("notification.mp3", "You have a new notification"),
    DEFAULT_EVENT: EventSound("notification.mp3", "You have a new notification"),
}


def build_event_table(extra: Mapping[str, EventSound] | None = None) -> dict[str, EventSound]:
    """Built-in table with configured entries merged over it."""
    table = dict(EVENT_SOUNDS)
    if extra:
        table.update(extra)
    return table


def lookup(table: Mapping[str, EventSound], event_key: str) -> tuple[str, EventSound]:
    """Exact-key lookup. Unknown keys resolve to the default entry."""
    if event_key in table:
        return event_key, table[event_key]
    return DEFAULT_EVENT, table.get(DEFAULT_EVENT, EVENT_SOUNDS[DEFAULT_EVENT])
