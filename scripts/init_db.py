from taskapi.core.logging_config import setup_logging
from taskapi.db.engine import get_engine
from taskapi.db.schema import metadata


def main():
    setup_logging()
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    print(f"DB schema created at {engine.url.render_as_string(hide_password=True)}.")


if __name__ == "__main__":
    main()
