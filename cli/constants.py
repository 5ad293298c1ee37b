"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["encrypt", "decrypt", "decrypt-segments", "inspect", "clear", "exit", "help"]

# Commands whose arguments are filesystem paths
PATH_COMMANDS = ("encrypt", "decrypt", "decrypt-segments", "inspect")

STYLE = Style.from_dict(
    {
        "prompt": "#2FA84F bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;47;168;79m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ____             __     __          _ _
/ ___|  ___  __ _ \\ \\   / /_ _ _   _| | |_
\\___ \\ / _ \\/ _` | \\ \\ / / _` | | | | | __|
 ___) |  __/ (_| |  \\ V / (_| | |_| | | |_
|____/ \\___|\\__, |   \\_/ \\__,_|\\__,_|_|\\__|
            |___/
{RESET}"""

WELCOME_TITLE = "SegVault CLI - Segmented authenticated file encryption"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "segvault> "

STDIN_MARKER = "-"

HELP_TEXT = """Available commands:
  encrypt <path_in> [-c segment_len] [-o out_dir] [-m metadata_path]
                                      Encrypt a file. Without -c the whole file is one segment.
                                      segment_len must be a positive multiple of 16.
  decrypt <in_dir> <path_out> <metadata_path | ->
                                      Decrypt using a metadata document (JSON or lines, '-' = stdin)
  decrypt-segments <in_dir> <path_out> <file_len> <id:key> [<id:key> ...]
                                      Decrypt from segment specifiers; segment length is read
                                      from the size of the first ciphertext object
  inspect <metadata_path | ->         Summarize a metadata document (keys are not shown)
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  encrypt report.pdf -c 1048576 -o vault/ -m report.json
  decrypt vault/ report.pdf report.json
  inspect report.json"""
