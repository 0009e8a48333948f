import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deploy_agent.api import containers, images, projects
from deploy_agent.core.config import Settings
from deploy_agent.core.log import configure_logging
from deploy_agent.domain.errors import DeployAgentError
from deploy_agent.domain.ports import ComposeRunner, ContainerEngine
from deploy_agent.services.compose_runner import ComposeCLIRunner
from deploy_agent.services.container_service import ContainerService
from deploy_agent.services.descriptor import DescriptorStore
from deploy_agent.services.docker_runtime import DockerSDKRuntime
from deploy_agent.services.image_service import ImageService
from deploy_agent.services.lifecycle_service import LifecycleService
from deploy_agent.services.project_service import ProjectService

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    engine: ContainerEngine | None = None,
    compose_runner: ComposeRunner | None = None,
) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    engine = engine or DockerSDKRuntime()
    compose_runner = compose_runner or ComposeCLIRunner(settings.COMPOSE_COMMAND, settings.COMPOSE_TIMEOUT_S)
    store = DescriptorStore(settings.PROJECTS_ROOT_PATH, settings.DESCRIPTOR_FILENAMES)

    app = FastAPI(title="deployment-agent")
    app.state.settings = settings
    app.state.container_service = ContainerService(engine)
    app.state.image_service = ImageService(engine)
    app.state.project_service = ProjectService(
        store, engine, settings.PROJECT_LABEL, settings.SERVICE_LABEL
    )
    app.state.lifecycle_service = LifecycleService(
        store, engine, compose_runner, settings.PROJECT_LABEL, settings.SERVICE_LABEL
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(containers.router)
    app.include_router(images.router)
    app.include_router(projects.router)

    @app.exception_handler(DeployAgentError)
    async def deploy_agent_error_handler(request: Request, exc: DeployAgentError):
        if exc.status_code >= 500:
            logger.error("[API] %s %s -> %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, **exc.extra()},
        )

    @app.get("/")
    async def root():
        return {"name": "deployment-agent"}

    # ---------- Startup ----------

    @app.on_event("startup")
    async def startup_event():
        root_path = settings.PROJECTS_ROOT_PATH
        if not root_path.is_dir():
            logger.warning("[STARTUP] projects root %s does not exist", root_path)
        else:
            logger.info("[STARTUP] serving projects from %s", root_path)

    return app


app = create_app()
