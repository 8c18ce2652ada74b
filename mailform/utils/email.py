from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import Configuration
from .submission import Submission


WRAP_WIDTH = 70


def _quote(text: str) -> str:
    return "\n".join(f"> {line}" if line else ">" for line in text.splitlines())


# plain text mails: user input is escaped by the sanitizer, not by the template engine
env = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "../templates"),
    autoescape=False,  # noqa: S701
    undefined=StrictUndefined,
)
env.filters["quote"] = _quote


@dataclass(frozen=True)
class OutboundMessage:
    sender: str
    sender_name: str
    recipient: str
    subject: str
    body: str
    reply_to: str | None = None


@dataclass(frozen=True)
class Message:
    title: str
    template: str

    def compose(
        self, config: Configuration, recipient: str, reply_to: str | None, submission: Submission
    ) -> OutboundMessage:
        context = {
            "name": submission.name,
            "email": submission.email,
            "message": submission.message,
            "site_name": config.site_name,
            "site_domain": config.site_domain,
            "width": WRAP_WIDTH,
        }
        return OutboundMessage(
            sender=config.from_email,
            sender_name=config.site_name,
            recipient=recipient,
            # headers must stay on one line
            subject=" ".join(self.title.format(**context).split()),
            body=env.get_template(self.template).render(**context),
            reply_to=reply_to,
        )


OWNER_NOTIFICATION = Message(title="Message from {name} via {site_domain}", template="owner_notification.txt")
CONFIRMATION = Message(title="Your message to {site_name} has been received", template="confirmation.txt")


def compose_messages(config: Configuration, submission: Submission) -> tuple[OutboundMessage, OutboundMessage]:
    """
    Build the owner notification and the submitter confirmation for a submission.

    Composition is pure: the same configuration and submission always produce equal messages.
    """

    return (
        OWNER_NOTIFICATION.compose(config, config.mailbox_email, submission.email, submission),
        CONFIRMATION.compose(config, submission.email, config.reply_to_email, submission),
    )
