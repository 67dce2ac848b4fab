"""HTML email composition for relayed orders."""

from html import escape

from order_relay.domain.orders import (
    BotOrderForm,
    FeaturesOrderForm,
    OrderRecord,
    OutgoingMail,
)


def compose_order_mail(
    order: OrderRecord, sender: str, recipient: str, price: str | None = None
) -> OutgoingMail:
    """Render an order into a message for the configured recipient."""
    if isinstance(order.form, BotOrderForm):
        heading = "New bot order!"
        details = _bot_details(order.form, price)
    else:
        heading = "New feature request!"
        details = _features_details(order.form, order)
    html = _ORDER_MAIL_HTML.format(
        heading=escape(heading),
        customer=_customer_boxes(order),
        details=details,
        submitted_box=_info_box(
            "Submitted", order.submitted_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        ),
    )
    return OutgoingMail(
        sender=sender,
        recipient=recipient,
        subject=f"New order from {order.discord_tag}",
        html=html,
        attachments=[order.attachment] if order.attachment else [],
    )


def _info_box(label: str, value: str) -> str:
    return (
        f'<div class="info-box"><strong>{escape(label)}:</strong> '
        f"{escape(value)}</div>"
    )


def _customer_boxes(order: OrderRecord) -> str:
    return "\n".join(
        [
            _info_box("Discord", order.discord_tag),
            _info_box("Discord ID", order.discord_id),
            _info_box("Email", order.email),
        ]
    )


def _bot_details(form: BotOrderForm, price: str | None) -> str:
    lines = [
        _info_box("Age", form.age),
        "<h2>Bot description</h2>",
        f'<div class="description">{escape(form.bot_description)}</div>',
    ]
    if price:
        lines.append(f'<div class="price">Price: {escape(price)}</div>')
    lines.append('<p class="note">Customer accepted the Discord rules.</p>')
    return "\n".join(lines)


def _features_details(form: FeaturesOrderForm, order: OrderRecord) -> str:
    lines = [
        "<h2>Requested features</h2>",
        f'<div class="description">{escape(form.features)}</div>',
    ]
    if form.optional_message:
        lines.append("<h2>Message</h2>")
        lines.append(
            f'<div class="description">{escape(form.optional_message)}</div>'
        )
    if order.attachment:
        lines.append(_info_box("Attached image", order.attachment.filename))
    return "\n".join(lines)


_ORDER_MAIL_HTML = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
      .header {{ background: #5865F2; color: white; padding: 30px; text-align: center; border-radius: 10px; }}
      .content {{ background: #f9f9f9; padding: 30px; margin-top: 20px; border-radius: 10px; }}
      .info-box {{ background: white; padding: 15px; margin: 10px 0; border-left: 4px solid #5865F2; border-radius: 5px; }}
      .description {{ background: white; padding: 20px; margin: 15px 0; border-radius: 5px; border: 2px solid #e0e0e0; white-space: pre-wrap; }}
      .price {{ background: #4CAF50; color: white; padding: 15px; text-align: center; font-size: 1.3em; font-weight: bold; border-radius: 5px; margin: 20px 0; }}
      .note {{ background: #e3f2fd; padding: 15px; border-radius: 5px; }}
    </style>
  </head>
  <body>
    <div class="header"><h1>{heading}</h1></div>
    <div class="content">
      <h2>Customer</h2>
{customer}
{details}
{submitted_box}
    </div>
  </body>
</html>
"""
