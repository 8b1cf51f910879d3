"""Profile management for izanami-cli.

Profiles are named deployment contexts stored in the config document. Each
profile also owns a client-key store (tenant -> project credentials) and a
set of named workers, which may carry client keys of their own.

Key Classes:
    ProfileService: Profile CRUD, client-key store and worker operations

Typical Usage:
    >>> service = ProfileService(config_path)
    >>> service.add_profile("sandbox", Profile(leader_url="http://localhost:9000"))
    >>> service.add_client_keys("acme", [], "client-id", "client-secret")
    >>> service.add_worker("eu-west", "http://eu-west.example.com")
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.exceptions import IzError, MissingRequiredError, NotFoundError
from izanami_cli.models.config import (
    ClientKeyStore,
    ConfigDocument,
    ProjectClientKeys,
    Profile,
    TenantClientKeys,
    WorkerConfig,
)
from izanami_cli.services.config_service import ConfigService
from izanami_cli.utils.env_utils import parse_bool

logger = logging.getLogger(__name__)

# Scalar profile keys editable with `iz profiles set`, mapped to attributes
PROFILE_SETTABLE_KEYS: dict[str, str] = {
    "session": "session",
    "leader-url": "leader_url",
    "client-base-url": "client_base_url",
    "personal-access-token-username": "personal_access_token_username",
    "personal-access-token": "personal_access_token",
    "tenant": "tenant",
    "project": "project",
    "context": "context",
    "insecure-skip-verify": "insecure_skip_verify",
    "default-worker": "default_worker",
}

PROFILE_SENSITIVE_KEYS = frozenset({"personal-access-token"})


@dataclass
class ClientKeyEntry:
    """One row of a flattened client-key store."""

    tenant: str
    project: str  # Empty for the tenant-level pair
    client_id: str
    client_secret: str

    @property
    def scope(self) -> str:
        return f"project:{self.project}" if self.project else "tenant"


def normalize_url(url: str) -> str:
    """Normalize a URL for comparison: lowercase scheme and host, no trailing slash."""
    url = url.strip()
    parts = urlsplit(url)
    if not parts.scheme:
        return url.rstrip("/").lower()
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path.rstrip("/"), parts.query, "")
    )


def worker_names(workers: dict[str, WorkerConfig] | None) -> list[str]:
    """Return worker names sorted alphabetically."""
    if not workers:
        return []
    return sorted(workers)


def flatten_client_keys(store: ClientKeyStore) -> list[ClientKeyEntry]:
    """Flatten a client-key store into rows sorted by tenant, then project."""
    entries: list[ClientKeyEntry] = []
    for tenant in sorted(store):
        keys = store[tenant]
        if keys.client_id or keys.client_secret:
            entries.append(ClientKeyEntry(tenant, "", keys.client_id, keys.client_secret))
        for project in sorted(keys.projects):
            project_keys = keys.projects[project]
            entries.append(
                ClientKeyEntry(tenant, project, project_keys.client_id, project_keys.client_secret)
            )
    return entries


def find_existing_client_keys(store: ClientKeyStore, tenant: str, projects: list[str]) -> list[str]:
    """Describe entries that writing (tenant, projects) would overwrite."""
    tenant_keys = store.get(tenant)
    if tenant_keys is None:
        return []
    if not projects:
        if tenant_keys.client_id or tenant_keys.client_secret:
            return [f"tenant '{tenant}'"]
        return []
    return [
        f"tenant '{tenant}', project '{project}'"
        for project in projects
        if project in tenant_keys.projects
    ]


def store_client_keys(
    store: ClientKeyStore, tenant: str, projects: list[str], client_id: str, client_secret: str
) -> None:
    """Write a credential pair at tenant level, or for each project."""
    tenant_keys = store.setdefault(tenant, TenantClientKeys())
    if not projects:
        tenant_keys.client_id = client_id
        tenant_keys.client_secret = client_secret
        return
    for project in projects:
        tenant_keys.projects[project] = ProjectClientKeys(
            client_id=client_id, client_secret=client_secret
        )


def remove_client_keys(store: ClientKeyStore, tenant: str, project: str | None) -> str:
    """Remove a tenant (with all its projects) or one project entry.

    Returns:
        Human-readable scope of what was removed

    Raises:
        NotFoundError: If nothing matches
    """
    scope = f"tenant '{tenant}'" if not project else f"tenant '{tenant}', project '{project}'"
    tenant_keys = store.get(tenant)
    if tenant_keys is None or (project and project not in tenant_keys.projects):
        raise NotFoundError(
            ERROR_MESSAGES["client_keys_not_found"].format(scope=scope), "client-keys", scope
        )
    if project:
        del tenant_keys.projects[project]
        if not tenant_keys.projects and not tenant_keys.is_complete:
            del store[tenant]
    else:
        del store[tenant]
    return scope


class ProfileService:
    """Service for profiles, their client keys and their workers."""

    def __init__(self, config_path: Path | None = None):
        """Initialize profile service.

        Args:
            config_path: Location of config.yaml (defaults to the per-user path)
        """
        self.config_service = ConfigService(config_path)

    @property
    def config_path(self) -> Path:
        return self.config_service.config_path

    def _load(self) -> ConfigDocument:
        return self.config_service.load_document()

    def _save(self, document: ConfigDocument) -> None:
        self.config_service.save_document(document)

    # =========================================================================
    # Profiles
    # =========================================================================

    def list_profiles(self) -> tuple[dict[str, Profile], str]:
        """Return all profiles and the active profile name."""
        document = self._load()
        return document.profiles, document.active_profile

    def get_active_profile_name(self) -> str:
        """Return the active profile name, empty when none is set."""
        return self._load().active_profile

    def get_profile(self, name: str) -> Profile:
        """Return a profile by name.

        Raises:
            NotFoundError: If no such profile exists
        """
        profile = self._load().profiles.get(name)
        if profile is None:
            raise NotFoundError(
                ERROR_MESSAGES["profile_not_found"].format(name=name), "profile", name
            )
        return profile

    def add_profile(self, name: str, profile: Profile) -> bool:
        """Create a profile. The first profile becomes the active one.

        Returns:
            True if the new profile was made active

        Raises:
            IzError: If a profile with that name already exists
        """
        document = self._load()
        if name in document.profiles:
            raise IzError(ERROR_MESSAGES["profile_exists"].format(name=name))

        document.profiles[name] = profile
        activated = not document.active_profile
        if activated:
            document.active_profile = name
        self._save(document)
        logger.debug("Added profile %s (active=%s)", name, activated)
        return activated

    def delete_profile(self, name: str) -> None:
        """Delete a profile, clearing the active profile if it was active.

        Raises:
            NotFoundError: If no such profile exists
        """
        document = self._load()
        if name not in document.profiles:
            raise NotFoundError(
                ERROR_MESSAGES["profile_not_found"].format(name=name), "profile", name
            )
        del document.profiles[name]
        if document.active_profile == name:
            document.active_profile = ""
        self._save(document)

    def set_active_profile(self, name: str) -> None:
        """Make a profile the active one.

        Raises:
            NotFoundError: If no such profile exists
        """
        document = self._load()
        if name not in document.profiles:
            raise NotFoundError(
                ERROR_MESSAGES["profile_not_found"].format(name=name), "profile", name
            )
        document.active_profile = name
        self._save(document)

    def set_profile_value(self, name: str, key: str, value: str) -> None:
        """Set a scalar key on a profile.

        Raises:
            IzError: If the key is not a settable profile key
            NotFoundError: If the profile (or named default worker) does not exist
        """
        attr = _profile_attr(key)
        document = self._load()
        profile = _require_profile(document, name)

        if attr == "insecure_skip_verify":
            try:
                setattr(profile, attr, parse_bool(value))
            except ValueError as e:
                raise IzError(
                    ERROR_MESSAGES["invalid_value"].format(
                        key=key, value=value, expected="true/false"
                    )
                ) from e
        else:
            if attr == "default_worker" and value and value not in profile.workers:
                raise worker_not_found_error(value, profile.workers)
            setattr(profile, attr, value)
        self._save(document)

    def unset_profile_value(self, name: str, key: str) -> None:
        """Clear a scalar key on a profile."""
        attr = _profile_attr(key)
        document = self._load()
        profile = _require_profile(document, name)
        setattr(profile, attr, False if attr == "insecure_skip_verify" else "")
        self._save(document)

    def find_profile_by_leader_url(self, leader_url: str) -> tuple[str, Profile] | None:
        """Find the first profile (by name) whose leader URL matches, ignoring trivia."""
        target = normalize_url(leader_url)
        profiles = self._load().profiles
        for name in sorted(profiles):
            profile = profiles[name]
            if profile.leader_url and normalize_url(profile.leader_url) == target:
                return name, profile
        return None

    # =========================================================================
    # Client keys
    # =========================================================================

    def find_existing_client_keys(
        self, tenant: str, projects: list[str], worker: str | None = None
    ) -> list[str]:
        """Return descriptions of entries an add would overwrite."""
        document = self._load()
        _, profile = _require_active_profile(document)
        store = _key_store(profile, worker)
        return find_existing_client_keys(store, tenant, projects)

    def add_client_keys(
        self,
        tenant: str,
        projects: list[str],
        client_id: str,
        client_secret: str,
        worker: str | None = None,
    ) -> str:
        """Store client credentials in the active profile (or one of its workers).

        With no projects the pair is stored at tenant level, otherwise once
        per project. Existing entries are overwritten; callers confirm first.

        Returns:
            Name of the profile that was updated

        Raises:
            MissingRequiredError: If tenant, credentials or an active profile is missing
            NotFoundError: If the named worker does not exist
        """
        if not tenant:
            raise MissingRequiredError(ERROR_MESSAGES["tenant_required"], "tenant")
        if not client_id or not client_secret:
            raise MissingRequiredError(ERROR_MESSAGES["client_keys_required"], "client-id")

        document = self._load()
        profile_name, profile = _require_active_profile(document)
        store_client_keys(_key_store(profile, worker), tenant, projects, client_id, client_secret)
        self._save(document)
        logger.debug("Stored client keys for tenant %s in profile %s", tenant, profile_name)
        return profile_name

    def list_client_keys(self, worker: str | None = None) -> tuple[ClientKeyStore, str]:
        """Return the active profile's (or worker's) client-key store and profile name."""
        document = self._load()
        profile_name, profile = _require_active_profile(document)
        return _key_store(profile, worker), profile_name

    def delete_client_keys(
        self, tenant: str, project: str | None = None, worker: str | None = None
    ) -> str:
        """Delete a tenant's keys, or a single project's keys.

        Returns:
            Description of the removed scope
        """
        document = self._load()
        _, profile = _require_active_profile(document)
        scope = remove_client_keys(_key_store(profile, worker), tenant, project)
        self._save(document)
        return scope

    # =========================================================================
    # Workers
    # =========================================================================

    def list_workers(self) -> tuple[dict[str, WorkerConfig], str, str]:
        """Return the active profile's workers, its default worker and the profile name."""
        document = self._load()
        profile_name, profile = _require_active_profile(document)
        return profile.workers, profile.default_worker, profile_name

    def get_worker(self, name: str) -> WorkerConfig:
        document = self._load()
        _, profile = _require_active_profile(document)
        worker = profile.workers.get(name)
        if worker is None:
            raise worker_not_found_error(name, profile.workers)
        return worker

    def add_worker(self, name: str, url: str, force: bool = False) -> bool:
        """Add a worker to the active profile. The first worker becomes the default.

        Returns:
            True if the worker was made the default

        Raises:
            MissingRequiredError: If the URL or an active profile is missing
            IzError: If the worker exists and force is False
        """
        if not url:
            raise MissingRequiredError(ERROR_MESSAGES["worker_url_required"], "url")

        document = self._load()
        _, profile = _require_active_profile(document)
        existing = profile.workers.get(name)
        if existing is not None and not force:
            raise IzError(ERROR_MESSAGES["worker_exists"].format(name=name))

        # Overwriting keeps the worker's scoped credentials
        client_keys = existing.client_keys if existing is not None else {}
        profile.workers[name] = WorkerConfig(url=url, client_keys=client_keys)
        became_default = not profile.default_worker
        if became_default:
            profile.default_worker = name
        self._save(document)
        return became_default

    def delete_worker(self, name: str) -> None:
        """Delete a worker, clearing the default if it pointed at it."""
        document = self._load()
        _, profile = _require_active_profile(document)
        if name not in profile.workers:
            raise worker_not_found_error(name, profile.workers)
        del profile.workers[name]
        if profile.default_worker == name:
            profile.default_worker = ""
        self._save(document)

    def set_default_worker(self, name: str) -> None:
        document = self._load()
        _, profile = _require_active_profile(document)
        if name not in profile.workers:
            raise worker_not_found_error(name, profile.workers)
        profile.default_worker = name
        self._save(document)


def _profile_attr(key: str) -> str:
    attr = PROFILE_SETTABLE_KEYS.get(key)
    if attr is None:
        raise IzError(ERROR_MESSAGES["invalid_profile_key"].format(key=key))
    return attr


def _require_profile(document: ConfigDocument, name: str) -> Profile:
    profile = document.profiles.get(name)
    if profile is None:
        raise NotFoundError(ERROR_MESSAGES["profile_not_found"].format(name=name), "profile", name)
    return profile


def _require_active_profile(document: ConfigDocument) -> tuple[str, Profile]:
    name = document.active_profile
    if not name:
        raise MissingRequiredError(ERROR_MESSAGES["no_active_profile"], "profile")
    return name, _require_profile(document, name)


def _key_store(profile: Profile, worker: str | None) -> ClientKeyStore:
    if not worker:
        return profile.client_keys
    worker_config = profile.workers.get(worker)
    if worker_config is None:
        raise worker_not_found_error(worker, profile.workers)
    return worker_config.client_keys


def worker_not_found_error(name: str, workers: dict[str, WorkerConfig]) -> NotFoundError:
    available = worker_names(workers)
    if not available:
        message = ERROR_MESSAGES["worker_not_found_none"].format(name=name)
    else:
        message = ERROR_MESSAGES["worker_not_found"].format(
            name=name, available=", ".join(available)
        )
    return NotFoundError(message, "worker", name)


def get_profile_service(config_path: Path | None = None) -> ProfileService:
    """Get a ProfileService instance."""
    return ProfileService(config_path)
