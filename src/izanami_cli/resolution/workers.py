"""Worker endpoint resolution.

A worker is a named alternate base URL attached to a profile. An explicit
--worker name always wins and must exist. Without it the leader URL is used,
unless the caller opts into worker-aware resolution:

    1. --worker flag      (named, must exist)
    2. IZ_WORKER          (named, must exist)
    3. IZ_WORKER_URL      (direct URL, no lookup)
    4. profile default    (a dangling default warns and falls through)
    5. standalone         (leader URL)
"""

from collections.abc import Callable, Mapping

from izanami_cli.config.messages import VERBOSE_MESSAGES
from izanami_cli.constants import ENV_WORKER, ENV_WORKER_URL
from izanami_cli.models.config import Profile, WorkerConfig
from izanami_cli.models.enums import WorkerSource
from izanami_cli.models.resolved import ResolvedConfig, ResolvedWorker
from izanami_cli.services.profile_service import worker_not_found_error, worker_names

WarningSink = Callable[[str], None]


def resolve_worker_from_profile(
    profile: Profile | None,
) -> tuple[dict[str, WorkerConfig], str]:
    """Return a profile's workers and default worker name (empty without a profile)."""
    if profile is None:
        return {}, ""
    return profile.workers, profile.default_worker


def resolve_named_worker(
    name: str, source: WorkerSource, workers: dict[str, WorkerConfig]
) -> ResolvedWorker:
    """Look a worker up by name.

    Raises:
        NotFoundError: If the worker does not exist
    """
    worker = workers.get(name)
    if worker is None:
        raise worker_not_found_error(name, workers)
    return ResolvedWorker(
        source=source, url=worker.url, name=name, client_keys=worker.client_keys
    )


def resolve_worker(
    worker_flag: str,
    workers: dict[str, WorkerConfig],
    default_worker: str,
    environ: Mapping[str, str] | None = None,
    warn: WarningSink | None = None,
    worker_aware: bool = False,
) -> ResolvedWorker:
    """Select the endpoint for client-facing calls.

    Args:
        worker_flag: --worker value, empty when not given
        workers: The profile's workers
        default_worker: The profile's default worker name
        environ: Environment for IZ_WORKER / IZ_WORKER_URL (worker-aware only)
        warn: Receives a message when the default worker is dangling
        worker_aware: Consult the environment and the profile default

    Raises:
        NotFoundError: If a named worker (flag or IZ_WORKER) does not exist
    """
    if worker_flag:
        return resolve_named_worker(worker_flag, WorkerSource.FLAG, workers)

    if not worker_aware:
        return ResolvedWorker(source=WorkerSource.STANDALONE)

    environ = environ or {}
    env_worker = environ.get(ENV_WORKER, "")
    if env_worker:
        return resolve_named_worker(env_worker, WorkerSource.ENV_NAME, workers)

    env_url = environ.get(ENV_WORKER_URL, "")
    if env_url:
        return ResolvedWorker(source=WorkerSource.ENV_URL, url=env_url)

    if default_worker:
        worker = workers.get(default_worker)
        if worker is not None:
            return ResolvedWorker(
                source=WorkerSource.DEFAULT,
                url=worker.url,
                name=default_worker,
                client_keys=worker.client_keys,
            )
        if warn is not None:
            available = worker_names(workers)
            if available:
                warn(
                    VERBOSE_MESSAGES["default_worker_dangling"].format(
                        name=default_worker, available=", ".join(available)
                    )
                )
            else:
                warn(VERBOSE_MESSAGES["default_worker_dangling_none"].format(name=default_worker))

    return ResolvedWorker(source=WorkerSource.STANDALONE)


def apply_worker(config: ResolvedConfig, worker: ResolvedWorker) -> None:
    """Record the selected worker on the resolved configuration."""
    config.worker_url = worker.url
    config.worker_name = worker.name
