"""
MS Graph client setup with lazy initialization.

The attendance calendar and the report mailbox are both reached through
one app-only client (Calendars.ReadWrite and Mail.Send application
permissions).
"""

from azure.identity import ClientSecretCredential
from msgraph import GraphServiceClient

from core.config import GRAPH_APP_ID, GRAPH_CLIENT_SECRET, GRAPH_TENANT_ID
from core.errors import StoreError

_graph_client: GraphServiceClient | None = None


def get_graph_client() -> GraphServiceClient:
    """Get or create the MS Graph client (lazy initialization)."""
    global _graph_client
    if _graph_client is None:
        if not (GRAPH_TENANT_ID and GRAPH_APP_ID and GRAPH_CLIENT_SECRET):
            raise StoreError("MS Graph credentials are not configured")
        credential = ClientSecretCredential(
            tenant_id=GRAPH_TENANT_ID,
            client_id=GRAPH_APP_ID,
            client_secret=GRAPH_CLIENT_SECRET,
        )
        _graph_client = GraphServiceClient(
            credentials=credential, scopes=["https://graph.microsoft.com/.default"]
        )
    return _graph_client
