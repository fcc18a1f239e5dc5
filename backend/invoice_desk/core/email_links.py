"""Email Links - subject line and mailto: URL for sending an invoice by email."""

from dataclasses import dataclass
from urllib.parse import quote

from invoice_desk.core.entities import BusinessSettings, Invoice


@dataclass(frozen=True)
class EmailDraft:
    to: str
    subject: str
    body: str
    mailto: str


def email_subject(invoice: Invoice, settings: BusinessSettings) -> str:
    return f"Invoice {invoice.invoice_number} from {settings.business_name}"


def build_email_draft(
    invoice: Invoice, settings: BusinessSettings, body: str,
) -> EmailDraft:
    """Compose the draft; subject and body are percent-encoded in the mailto URL."""
    subject = email_subject(invoice, settings)
    mailto = (
        f"mailto:{invoice.client_email}"
        f"?subject={quote(subject, safe='')}&body={quote(body, safe='')}"
    )
    return EmailDraft(
        to=invoice.client_email, subject=subject, body=body, mailto=mailto,
    )
