import uvicorn

from deploy_agent.core.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run("deploy_agent.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
