"""Application and domain actions behind the dokploy_application tool."""

from enum import Enum

from dokploy_mcp.endpoints import Endpoint
from dokploy_mcp.router import ActionFamily

WATCH = ("watchPaths", "enableSubmodules")


class ApplicationAction(str, Enum):
    CREATE = "create"
    DELETE = "delete"
    DEPLOY = "deploy"
    START = "start"
    STOP = "stop"
    UPDATE = "update"
    GET = "get"
    REDEPLOY = "redeploy"
    RELOAD = "reload"
    MOVE = "move"
    CANCEL_DEPLOYMENT = "cancelDeployment"
    CLEAN_QUEUES = "cleanQueues"
    DISCONNECT_GIT_PROVIDER = "disconnectGitProvider"
    MARK_RUNNING = "markRunning"
    READ_APP_MONITORING = "readAppMonitoring"
    READ_TRAEFIK_CONFIG = "readTraefikConfig"
    REFRESH_TOKEN = "refreshToken"
    SAVE_BITBUCKET_PROVIDER = "saveBitbucketProvider"
    SAVE_BUILD_TYPE = "saveBuildType"
    SAVE_DOCKER_PROVIDER = "saveDockerProvider"
    SAVE_ENVIRONMENT = "saveEnvironment"
    SAVE_GIT_PROVIDER = "saveGitProvider"
    SAVE_GITEA_PROVIDER = "saveGiteaProvider"
    SAVE_GITHUB_PROVIDER = "saveGithubProvider"
    SAVE_GITLAB_PROVIDER = "saveGitlabProvider"
    UPDATE_TRAEFIK_CONFIG = "updateTraefikConfig"
    DOMAIN_CREATE = "domainCreate"
    DOMAIN_DELETE = "domainDelete"
    DOMAIN_UPDATE = "domainUpdate"
    DOMAIN_GET = "domainGet"
    DOMAIN_BY_APPLICATION_ID = "domainByApplicationId"
    DOMAIN_BY_COMPOSE_ID = "domainByComposeId"
    DOMAIN_GENERATE_DOMAIN = "domainGenerateDomain"
    DOMAIN_CAN_GENERATE_TRAEFIK_ME_DOMAINS = "domainCanGenerateTraefikMeDomains"
    DOMAIN_VALIDATE = "domainValidate"


def _app(procedure: str, title: str, *optional: str, required: tuple[str, ...] = ()) -> Endpoint:
    return Endpoint(
        f"application.{procedure}",
        title,
        required=("applicationId",) + required,
        optional=optional,
    )


DOMAIN_FIELDS = (
    "path",
    "port",
    "https",
    "certificateType",
    "customCertResolver",
    "serviceName",
    "domainType",
    "internalPath",
    "stripPath",
)

A = ApplicationAction

APPLICATION_ENDPOINTS: dict[ApplicationAction, Endpoint] = {
    A.CREATE: Endpoint(
        "application.create",
        "Create application",
        required=("name", "environmentId"),
        optional=("appName", "description", "serverId"),
    ),
    A.GET: Endpoint("application.one", "Get application", method="GET", required=("applicationId",)),
    A.UPDATE: _app(
        "update",
        "Update application",
        "name",
        "appName",
        "description",
        "env",
        "buildArgs",
        "command",
        "replicas",
        "autoDeploy",
        "memoryReservation",
        "memoryLimit",
        "cpuReservation",
        "cpuLimit",
    ),
    A.DELETE: _app("delete", "Delete application"),
    A.DEPLOY: _app("deploy", "Deploy application", "title", "description"),
    A.REDEPLOY: _app("redeploy", "Redeploy application", "title", "description"),
    A.START: _app("start", "Start application"),
    A.STOP: _app("stop", "Stop application"),
    A.RELOAD: _app("reload", "Reload application", required=("appName",)),
    A.MOVE: _app("move", "Move application", required=("targetEnvironmentId",)),
    A.CANCEL_DEPLOYMENT: _app("cancelDeployment", "Cancel deployment"),
    A.CLEAN_QUEUES: _app("cleanQueues", "Clean deployment queues"),
    A.DISCONNECT_GIT_PROVIDER: _app("disconnectGitProvider", "Disconnect git provider"),
    A.MARK_RUNNING: _app("markRunning", "Mark application running"),
    A.READ_APP_MONITORING: Endpoint(
        "application.readAppMonitoring",
        "Read application monitoring",
        method="GET",
        required=("appName",),
    ),
    A.READ_TRAEFIK_CONFIG: Endpoint(
        "application.readTraefikConfig",
        "Read Traefik config",
        method="GET",
        required=("applicationId",),
    ),
    A.UPDATE_TRAEFIK_CONFIG: _app(
        "updateTraefikConfig", "Update Traefik config", required=("traefikConfig",)
    ),
    A.REFRESH_TOKEN: _app("refreshToken", "Refresh webhook token"),
    A.SAVE_BUILD_TYPE: _app(
        "saveBuildType",
        "Save build type",
        "dockerfile",
        "dockerContextPath",
        "dockerBuildStage",
        "herokuVersion",
        "publishDirectory",
        "isStaticSpa",
        required=("buildType",),
    ),
    A.SAVE_ENVIRONMENT: _app("saveEnvironment", "Save environment", "env", "buildArgs"),
    A.SAVE_DOCKER_PROVIDER: _app(
        "saveDockerProvider",
        "Save Docker provider",
        "dockerImage",
        "username",
        "password",
        "registryUrl",
    ),
    A.SAVE_GIT_PROVIDER: _app(
        "saveGitProvider",
        "Save git provider",
        "customGitUrl",
        "customGitBranch",
        "customGitBuildPath",
        "customGitSSHKeyId",
        *WATCH,
    ),
    A.SAVE_GITHUB_PROVIDER: _app(
        "saveGithubProvider",
        "Save GitHub provider",
        "repository",
        "branch",
        "owner",
        "buildPath",
        "githubId",
        "triggerType",
        *WATCH,
    ),
    A.SAVE_GITLAB_PROVIDER: _app(
        "saveGitlabProvider",
        "Save GitLab provider",
        "gitlabBranch",
        "gitlabBuildPath",
        "gitlabOwner",
        "gitlabRepository",
        "gitlabId",
        "gitlabProjectId",
        "gitlabPathNamespace",
        *WATCH,
    ),
    A.SAVE_BITBUCKET_PROVIDER: _app(
        "saveBitbucketProvider",
        "Save Bitbucket provider",
        "bitbucketBranch",
        "bitbucketBuildPath",
        "bitbucketOwner",
        "bitbucketRepository",
        "bitbucketId",
        *WATCH,
    ),
    A.SAVE_GITEA_PROVIDER: _app(
        "saveGiteaProvider",
        "Save Gitea provider",
        "giteaBranch",
        "giteaBuildPath",
        "giteaOwner",
        "giteaRepository",
        "giteaId",
        *WATCH,
    ),
    # Domains
    A.DOMAIN_CREATE: Endpoint(
        "domain.create",
        "Create domain",
        required=("host",),
        optional=("applicationId", "composeId", "previewDeploymentId") + DOMAIN_FIELDS,
    ),
    A.DOMAIN_UPDATE: Endpoint(
        "domain.update",
        "Update domain",
        required=("domainId",),
        optional=("host",) + DOMAIN_FIELDS,
    ),
    A.DOMAIN_DELETE: Endpoint("domain.delete", "Delete domain", required=("domainId",)),
    A.DOMAIN_GET: Endpoint("domain.one", "Get domain", method="GET", required=("domainId",)),
    A.DOMAIN_BY_APPLICATION_ID: Endpoint(
        "domain.byApplicationId",
        "List application domains",
        method="GET",
        required=("applicationId",),
    ),
    A.DOMAIN_BY_COMPOSE_ID: Endpoint(
        "domain.byComposeId",
        "List compose domains",
        method="GET",
        required=("composeId",),
    ),
    A.DOMAIN_GENERATE_DOMAIN: Endpoint(
        "domain.generateDomain",
        "Generate domain",
        required=("appName",),
        optional=("serverId",),
    ),
    A.DOMAIN_CAN_GENERATE_TRAEFIK_ME_DOMAINS: Endpoint(
        "domain.canGenerateTraefikMeDomains",
        "Check traefik.me domain support",
        method="GET",
        required=("serverId",),
    ),
    A.DOMAIN_VALIDATE: Endpoint(
        "domain.validateDomain",
        "Validate domain",
        required=("domain",),
        optional=("serverIp",),
    ),
}

APPLICATION_FAMILY = ActionFamily(
    name="application",
    tool_name="dokploy_application",
    label="application management",
    actions=ApplicationAction,
    endpoints=APPLICATION_ENDPOINTS,
)
