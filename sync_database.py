"""
Sync a JSON file of records into a database table
Every object in the file is inserted as a new record
"""

import argparse
import asyncio
import json
import logging
from config import ConfigurationError, get_config
from database import get_rdbms_connector
from model import Model
from sync import MormError

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments, falling back to configuration"""
    config = get_config()
    parser = argparse.ArgumentParser(description="Insert JSON records into a database table")
    parser.add_argument("records", nargs="?", default=config.system.records_path,
                        help="Path to a JSON array of objects")
    parser.add_argument("--table", default=config.model.table, help="Target table")
    parser.add_argument("--identity", default=config.model.identity, help="Identity column")
    parser.add_argument("--bulk", action="store_true", default=config.model.bulk,
                        help="Insert every record with one statement")
    return parser.parse_args(argv)


async def sync_records(args) -> int:
    """Main sync workflow"""
    config = get_config()

    logger.info(f"📚 Loading records from {args.records}")
    try:
        with open(args.records, 'r') as f:
            records = json.load(f)
    except FileNotFoundError:
        logger.error(f"❌ Records file not found: {args.records}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"❌ Records file is not valid JSON: {e}")
        return 1

    if not isinstance(records, list):
        logger.error("❌ Records file must contain a JSON array of objects")
        return 1

    for position, fields in enumerate(records):
        if not isinstance(fields, dict):
            logger.error(f"❌ Record {position} is not a JSON object: {fields!r}")
            return 1

    connector = get_rdbms_connector(config.rdbms)

    try:
        if not await connector.test_connection():
            logger.error("Failed to connect to RDBMS")
            return 1

        model = Model(
            table=args.table,
            identity=args.identity,
            executor=connector
        )

        for fields in records:
            model.create(fields)

        result = await model.save(bulk=args.bulk)

        logger.info("=" * 80)
        logger.info("SYNC SUMMARY")
        logger.info("=" * 80)
        logger.info(f"   Table: {args.table}")
        logger.info(f"   Inserted: {result.inserted}")
        logger.info(f"   Statements: {len(result.statements)}")
        logger.info("✅ SYNC COMPLETED SUCCESSFULLY!")
        return 0

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    except MormError as e:
        logger.error(f"❌ Sync failed: {e}", exc_info=True)
        return 1

    finally:
        await connector.close()
        logger.info("Connections closed")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=get_config().system.log_level)
    return asyncio.run(sync_records(args))


if __name__ == "__main__":
    import sys
    sys.exit(main())
