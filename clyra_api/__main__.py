import uvicorn

from clyra_api.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run("clyra_api.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
