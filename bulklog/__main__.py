import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("bulklog.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
