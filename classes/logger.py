import logging
import os

from datetime import datetime


class Logger:

    def __init__(self, level=logging.INFO, log_dir="./logs"):
        self.logger = logging.getLogger("sweeper")
        self.logger.setLevel(level)
        self.log_dir = log_dir
        self.f_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    @staticmethod
    def get_current_datetime():
        now = datetime.now()
        date_now = now.strftime("%m-%d-%Y-%H-%M-%S")
        return date_now

    def set_handler(self, file=True, console=True):
        if file:
            os.makedirs(self.log_dir, exist_ok=True)
            f_handler = logging.FileHandler(os.path.join(self.log_dir, f'logs_{self.get_current_datetime()}.log'))
            f_handler.setFormatter(self.f_format)
            self.logger.addHandler(f_handler)
        if console:
            c_handler = logging.StreamHandler()
            c_handler.setFormatter(self.f_format)
            self.logger.addHandler(c_handler)

    def set_level(self, level):
        self.logger.setLevel(level)

    def close(self):
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
