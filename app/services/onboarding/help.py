"""
Contextual help for the onboarding help chat.

Replies are keyword matched: an FAQ of the current step wins, then a few
general topics, then a default answer.
"""

from typing import Dict, List, Optional
from app.schemas.onboarding import FaqEntry, HelpReply, StepHelp


STEP_HELP_CONTENT: Dict[str, StepHelp] = {
    "connect_systems": StepHelp(
        title="System Integration Help",
        quick_help="Connect your HR and Finance systems to automatically sync employee data and manage budgets.",
        suggestions=[
            "How do I connect Workday?",
            "What data gets synced?",
            "Is my data secure?",
            "Troubleshoot connection issues",
        ],
        faqs=[
            FaqEntry(
                question="How do I connect my HR system?",
                answer='Select your HR platform from the dropdown, enter your API credentials, and click "Test Connection". '
                       "We support Workday, BambooHR, ADP, and SAP SuccessFactors.",
            ),
            FaqEntry(
                question="What employee data gets synced?",
                answer="We sync basic employee information (name, email, department, manager), cost centers, and approval "
                       "hierarchies. Sensitive data like salaries are never accessed.",
            ),
            FaqEntry(
                question="How secure is the integration?",
                answer="All connections use TLS 1.3 encryption and OAuth 2.0 authentication. "
                       "Data is encrypted at rest and in transit.",
            ),
        ],
    ),
    "invite_team": StepHelp(
        title="Team Invitation Help",
        quick_help="Add team members to your organization so they can start booking and managing travel.",
        suggestions=[
            "How to bulk invite users?",
            "Set user roles and permissions",
            "Resend invitation emails",
            "Import from CSV file",
        ],
        faqs=[
            FaqEntry(
                question="How do I bulk invite team members?",
                answer='Use the "Bulk Import" feature to upload a CSV file with columns: email, name, role, department. '
                       "Download our template for the correct format.",
            ),
            FaqEntry(
                question="What are the different user roles?",
                answer="Admin: Full system access. Travel Manager: Approve requests and view reports. "
                       "Traveler: Book trips and manage expenses.",
            ),
        ],
    ),
    "view_dashboard": StepHelp(
        title="Dashboard Navigation Help",
        quick_help="Your dashboard shows pending approvals, spending analytics, and team travel activity.",
        suggestions=[
            "Understanding the metrics",
            "Customize dashboard widgets",
            "Set up alerts and notifications",
            "Export dashboard data",
        ],
        faqs=[
            FaqEntry(
                question="What do the dashboard metrics mean?",
                answer="Pending Requests: Travel requests awaiting approval. Monthly Spend: Current month expenses vs budget. "
                       "Policy Compliance: Percentage of bookings within policy.",
            ),
        ],
    ),
    "sync_calendar": StepHelp(
        title="Calendar Integration Help",
        quick_help="Connect your calendar to avoid scheduling conflicts and automatically sync travel dates.",
        suggestions=[
            "Connect Google Calendar",
            "Connect Outlook Calendar",
            "Privacy and permissions",
            "Sync troubleshooting",
        ],
        faqs=[
            FaqEntry(
                question="Which calendars are supported?",
                answer="We support Google Calendar, Microsoft Outlook, Apple iCloud, and any CalDAV-compatible calendar.",
            ),
            FaqEntry(
                question="What calendar data do you access?",
                answer="We only read event dates and times to check for conflicts. "
                       "Event titles, descriptions, and attendees are never accessed.",
            ),
        ],
    ),
}

DEFAULT_SUGGESTIONS = [
    "Getting started guide",
    "Common setup issues",
    "Contact support",
    "Feature overview",
]

# (keywords, reply) checked in order when no step FAQ matches
GENERAL_TOPICS = [
    (
        ("connect", "integration"),
        HelpReply(
            content="To connect your systems, go to the Integration tab, select your platform, and follow the setup wizard. "
                    "Make sure you have admin credentials for your HR/Finance system.",
            suggestions=["What credentials do I need?", "Troubleshoot connection", "Security information"],
        ),
    ),
    (
        ("invite", "team"),
        HelpReply(
            content="You can invite team members individually or use bulk import. "
                    "Each user will receive an email invitation with setup instructions.",
            suggestions=["Bulk import process", "User roles explained", "Resend invitations"],
        ),
    ),
    (
        ("calendar",),
        HelpReply(
            content="Calendar integration helps prevent double-booking and automatically syncs your travel dates. "
                    "We support Google Calendar, Outlook, and other major providers.",
            suggestions=["Setup Google Calendar", "Privacy settings", "Sync troubleshooting"],
        ),
    ),
]

DEFAULT_REPLY = HelpReply(
    content="I'd be happy to help! Could you be more specific about what you're trying to do? "
            "I can assist with system setup, integrations, user management, and general platform questions.",
    suggestions=["System integration help", "User management", "Booking assistance", "Contact support"],
)


def get_step_help(step_id: Optional[str]) -> Optional[StepHelp]:
    if not step_id:
        return None
    return STEP_HELP_CONTENT.get(step_id)


def welcome_message(step_id: Optional[str]) -> HelpReply:
    """Greeting shown when the help chat opens."""
    help_entry = get_step_help(step_id)
    if help_entry is None:
        return HelpReply(
            content="Hi! I'm your NestMap assistant. How can I help you with your setup today?",
            suggestions=list(DEFAULT_SUGGESTIONS),
        )
    return HelpReply(
        content=f"Hi! I'm here to help with {help_entry.title.lower()}. {help_entry.quick_help}",
        suggestions=list(help_entry.suggestions),
    )


def _first_word(text: str) -> str:
    words = text.split()
    return words[0] if words else ""


def _matching_faq(faqs: List[FaqEntry], message: str) -> Optional[FaqEntry]:
    for faq in faqs:
        question = faq.question.lower()
        if _first_word(question) in message or _first_word(message) in question:
            return faq
    return None


def answer_question(message: str, step_id: Optional[str] = None) -> HelpReply:
    """
    Answer a help chat message.

    Args:
        message: The user's question
        step_id: Current onboarding step, if any

    Returns:
        Reply with follow-up suggestions

    Raises:
        ValueError: If the message is blank
    """
    if not message or not message.strip():
        raise ValueError("Help message must not be empty")

    lower_message = message.strip().lower()

    help_entry = get_step_help(step_id)
    if help_entry is not None:
        faq = _matching_faq(help_entry.faqs, lower_message)
        if faq is not None:
            return HelpReply(
                content=faq.answer,
                suggestions=[s for s in help_entry.suggestions if s != message.strip()],
            )

    for keywords, reply in GENERAL_TOPICS:
        if any(keyword in lower_message for keyword in keywords):
            return reply.model_copy(deep=True)

    return DEFAULT_REPLY.model_copy(deep=True)
