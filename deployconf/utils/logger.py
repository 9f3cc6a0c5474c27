import termtables

from .constants import LOGS_PATH
from .helpers import create_dirs

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"

BOLD = "\033[1m"

END = "\033[0m"

REPORT_HEADER = ["#", "Target", "Endpoint", "Chain ID", "Accounts", "Fee", "Status"]


class Logger:
    def __init__(self, log_file):
        self.log_file = log_file

    # log to file
    def log(self, text):
        create_dirs(self.log_file)
        with open(self.log_file, mode="a") as logs:
            logs.write(text + "\n")

    # print to std out
    def stdout(self, text):
        print(text)

    def info(self, text, value=None):
        log_text = "🔵 [INFO] " + text
        stdout_text = self.hl(" 🔵 [INFO] ", BLUE) + text

        if value is not None:
            log_text = self.cln(log_text, value)
            stdout_text = self.cln(stdout_text, self.hl(value, BOLD))

        self.log(log_text)
        self.stdout(stdout_text)

    def okay(self, text, value=None):
        log_text = "🟢 [OKAY] " + text
        stdout_text = self.hl(" 🟢 [OKAY] ", GREEN) + text

        if value is not None:
            log_text += ": " + str(value)
            stdout_text += ": " + self.hl(value, BOLD)

        self.log(log_text)
        self.stdout(stdout_text)

    def warn(self, text, value=None):
        log_text = "🟠 [WARN] " + text
        stdout_text = self.hl(" 🟠 [WARN] ", YELLOW) + text

        if value is not None:
            log_text += ": " + str(value)
            stdout_text += ": " + self.hl(value, BOLD)

        self.log(log_text)
        self.stdout(stdout_text)

    def error(self, text, value=None):
        log_text = "🔴 [ERROR] " + text
        stdout_text = self.hl(" 🔴 [ERROR] ", RED) + text

        if value is not None:
            log_text += ": " + str(value)
            stdout_text += ": " + self.hl(value, BOLD)

        self.log(log_text)
        self.stdout(stdout_text)

    def report_table(self, table):
        log_table = termtables.to_string(
            table,
            header=REPORT_HEADER,
            style=termtables.styles.rounded_double,
        )
        self.log(log_table)

        stdout_table = [self.color_row(row) for row in table]
        table_colored_string = termtables.to_string(
            stdout_table,
            header=REPORT_HEADER,
            style=termtables.styles.rounded_double,
        )

        self.stdout(table_colored_string)

    def color_row(self, row):
        hlcolor = GREEN if row[-1] == "ok" else RED
        return [self.hl(cell, hlcolor) for cell in row]

    def hl(self, text, color=BOLD):
        return f"{color}{text}{END}"

    def hlgreen(self, text):
        return self.hl(text, GREEN)

    def hlred(self, text):
        return self.hl(text, RED)

    def cln(self, text1, text2):
        return f"{text1}: {text2}"

    def divider(self):
        self.log(" - +" * 20)
        self.stdout((self.hlred(" -") + self.hlgreen(" +")) * 20)


logger = Logger(LOGS_PATH)
