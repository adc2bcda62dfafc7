import json
import logging
import os

from datetime import datetime
import pandas as pd

utils_logger = logging.getLogger('sweeper.utils')


def load_config(path_to_json):
    """Load a JSON configuration profile.

    :param path_to_json: The path to the JSON config file

    :returns: A dict with application config
    """
    with open(path_to_json, "r") as f:
        return json.load(f)


def save_to_excel(df, name, sheet_name="records", output_dir="./data"):
    """
    Save the df to an Excel file.

    :param df: a pandas.DataFrame
    :param name: str the name of the Excel file, a timestamp is appended
    :param sheet_name: str the name of the sheet
    :param output_dir: str the folder where the file is written, created if missing
    :return: the path of the Excel file
    """
    now = datetime.now()
    date_now = now.strftime("%m-%d-%Y-%H-%M-%S")
    os.makedirs(output_dir, exist_ok=True)
    excel_filename = os.path.join(output_dir, f"{name}_{date_now}.xlsx")
    with pd.ExcelWriter(excel_filename) as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    utils_logger.info(f"Saved {len(df.index)} rows to {excel_filename}")
    return excel_filename
