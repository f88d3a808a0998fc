import uvicorn

from .config import get_settings
from .server import build_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(build_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
