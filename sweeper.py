import argparse
import logging
import sys

import pandas as pd

from utils import load_config, save_to_excel

from classes.netsuite import NetSuite, NetSuiteConfigError, NetSuiteError
from classes.deleter import BulkDeleter
from classes.logger import Logger


def main(argv=None):

    my_parser = argparse.ArgumentParser(description="*** Sweeper, deletes all contract transaction lines ***")
    my_parser.add_argument('-c',
                           '--config',
                           required=True,
                           help='Path to a JSON Configuration file.')
    my_parser.add_argument('-v',
                           '--verbose',
                           action='store_true',
                           help='Enable extra verbose for debugging')
    my_parser.add_argument('-ex',
                           '--export',
                           action='store_true',
                           help='Export the records that would be deleted to an Excel file and quits.')
    my_parser.add_argument('-r',
                           '--report',
                           action='store_true',
                           help='Save the outcome of every deletion to an Excel file.')

    args = my_parser.parse_args(argv)  # Parse arguments in command line
    prog_config = load_config(args.config)  # Load configuration provided as argument

    logger = Logger(logging.DEBUG if args.verbose else logging.INFO)
    logger.set_handler(file=True)
    try:
        return run(prog_config, export=args.export, report=args.report)
    finally:
        logger.close()


def run(prog_config, export=False, report=False):
    """Run the cleanup described by a configuration profile.

    :param prog_config: a dict loaded from a JSON config file
    :param export: if True only export the records to delete
    :param report: if True save the outcome of every deletion
    :return: the exit code, 0 if every record was deleted
    """
    logger = logging.getLogger("sweeper")
    logger.info(f"Initiating Sweeper with {prog_config.get('env', 'default')} configuration")

    try:
        netsuite = NetSuite(prog_config)  # Create a NetSuite object to manage API queries
        deleter = BulkDeleter.from_config(netsuite, prog_config)

        if export:
            rows = deleter.enumerate()
            save_to_excel(pd.DataFrame(rows, columns=None if rows else ["id"]), f"{deleter.record_type}_to_delete")
            return 0

        summary = deleter.run()
    except NetSuiteConfigError as conf_err:
        logger.exception(conf_err)
        logger.error("Invalid configuration, check the profile and NETSUITE_ACCESS_TOKEN. Sweeper will exit.")
        return 1
    except NetSuiteError as ns_err:
        logger.exception(ns_err)
        logger.error("Cannot list the records to delete. Sweeper will exit.")
        return 1

    if report:
        save_to_excel(summary.to_dataframe(), f"{deleter.record_type}_deletions", sheet_name="deletions")

    return 0 if summary.all_succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
