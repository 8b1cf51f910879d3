"""Client credential resolution.

Client API credentials (client-id/client-secret) are used for feature
evaluation calls. They come from, in order:

    1. --client-id / --client-secret flags, applied field by field
    2. Values already merged into the ResolvedConfig (environment, profile)
    3. The client-key store: first requested project with a complete pair,
       then the tenant-level pair

Nothing resolving is not an error here; an authenticated call will fail
later on its own.
"""

import logging

from izanami_cli.config.messages import VERBOSE_MESSAGES
from izanami_cli.models.config import ClientKeyStore
from izanami_cli.models.resolved import ResolvedConfig
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.utils.console import print_plain

logger = logging.getLogger(__name__)


def resolve_credentials_from_keys(
    client_keys: ClientKeyStore | None, tenant: str, projects: list[str] | None = None
) -> tuple[str, str]:
    """Look up a credential pair in a client-key store.

    Args:
        client_keys: Tenant -> keys mapping
        tenant: Tenant to look under
        projects: Projects to try, in order; the first complete pair wins

    Returns:
        (client_id, client_secret), both empty when nothing matches
    """
    if not client_keys or not tenant:
        return "", ""

    tenant_keys = client_keys.get(tenant)
    if tenant_keys is None:
        return "", ""

    for project in projects or []:
        project_keys = tenant_keys.projects.get(project)
        if project_keys is not None and project_keys.is_complete:
            return project_keys.client_id, project_keys.client_secret

    if tenant_keys.is_complete:
        return tenant_keys.client_id, tenant_keys.client_secret
    return "", ""


def resolve_client_credentials(
    ctx: InvocationContext,
    config: ResolvedConfig,
    flag_client_id: str = "",
    flag_client_secret: str = "",
    worker_client_keys: ClientKeyStore | None = None,
    projects: list[str] | None = None,
    flag_client_base_url: str = "",
) -> None:
    """Resolve client credentials into ``config`` in place.

    Args:
        ctx: Current invocation (verbose output goes to its stderr console)
        config: Resolved configuration to update
        flag_client_id: --client-id value, empty when not given
        flag_client_secret: --client-secret value, empty when not given
        worker_client_keys: Client keys of the selected worker; when non-empty
            they replace the profile's store for the hierarchy lookup
        projects: Projects to try in the hierarchy, in order
        flag_client_base_url: --client-base-url value, empty when not given
    """
    if flag_client_id:
        config.client_id = flag_client_id
    if flag_client_secret:
        config.client_secret = flag_client_secret
    if flag_client_base_url:
        config.client_base_url = flag_client_base_url

    if config.client_id or config.client_secret:
        return

    projects = projects or []
    store = worker_client_keys if worker_client_keys else config.client_keys
    client_id, client_secret = resolve_credentials_from_keys(store, config.tenant, projects)
    if not (client_id and client_secret):
        logger.debug("No client credentials found for tenant %r", config.tenant)
        return

    config.client_id = client_id
    config.client_secret = client_secret
    if config.verbose:
        if projects:
            message = VERBOSE_MESSAGES["client_credentials_projects"].format(
                tenant=config.tenant, projects=projects
            )
        else:
            message = VERBOSE_MESSAGES["client_credentials_tenant"].format(tenant=config.tenant)
        print_plain(message, out=ctx.err_console)
