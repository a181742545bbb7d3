import logging

from classdesk.config import settings
from classdesk.db import Base, engine
from classdesk.services.store_provider import build_store


logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s %(message)s')
logger = logging.getLogger('bootstrap')


def main():
    if settings.storage_backend != 'memory':
        Base.metadata.create_all(bind=engine)
    store = build_store()
    for slot, payload in store.snapshot().items():
        if isinstance(payload, list):
            logger.info('slot=%s records=%s', slot, len(payload))
        else:
            logger.info('slot=%s value=%s', slot, payload)


if __name__ == '__main__':
    main()
