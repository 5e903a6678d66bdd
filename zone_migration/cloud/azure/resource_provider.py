import logging

from azure.core.credentials import TokenCredential
from azure.mgmt.resource import ResourceManagementClient

logger = logging.getLogger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"


class ResourceProvider:
    subscription_id: str
    credentials: TokenCredential

    def __init__(self, subscription_id: str, credentials: TokenCredential, resource_client: ResourceManagementClient = None):
        self.subscription_id = subscription_id
        self.credentials = credentials
        self.resource_client = resource_client or ResourceManagementClient(credentials, subscription_id)

    def authenticate(self):
        logger.debug("Requesting management token for subscription %s", self.subscription_id)
        self.credentials.get_token(MANAGEMENT_SCOPE)

    def get_resource_group(self, resource_group_name: str):
        logger.debug("GETting resource group: /subscriptions/%s/resourceGroups/%s", self.subscription_id, resource_group_name)
        return self.resource_client.resource_groups.get(resource_group_name)
