#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from colorama import init, Fore, Style
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path

from wowsrp.utils.ConfigLoader import ConfigLoader

init()


class DebugColorLevel(Enum):
    SUCCESS = Fore.GREEN + Style.BRIGHT
    INFO = Fore.BLUE + Style.BRIGHT
    WARNING = Fore.YELLOW + Style.BRIGHT
    ERROR = Fore.RED + Style.BRIGHT
    DEBUG = Fore.CYAN + Style.BRIGHT


class DebugLevel(IntEnum):
    NONE = 0x00
    SUCCESS = 0x01
    INFO = 0x02
    WARNING = 0x08
    ERROR = 0x10
    DEBUG = 0x20
    ALL = 0xff


class Logger:
    """Unified colored console logger + file logger."""

    @staticmethod
    def _get_logging_mask(levels):
        level_map = {
            'None': DebugLevel.NONE,
            'Success': DebugLevel.SUCCESS,
            'Information': DebugLevel.INFO,
            'Warning': DebugLevel.WARNING,
            'Error': DebugLevel.ERROR,
            'Debug': DebugLevel.DEBUG,
            'All': DebugLevel.ALL
        }

        mask = DebugLevel.NONE
        for level in levels:
            if level.strip() in level_map:
                mask |= level_map[level.strip()]

        return mask

    @staticmethod
    def _logging_cfg() -> dict:
        return ConfigLoader.get_config().get('Logging', {})

    @staticmethod
    def _should_log(level: DebugLevel):
        levels = Logger._logging_cfg().get('logging_levels', 'All').split(',')
        mask = Logger._get_logging_mask(levels)
        return (mask & level) != 0

    @staticmethod
    def _should_log_file(level: DebugLevel):
        levels = Logger._logging_cfg().get('logging_file_levels', 'None').split(',')
        mask = Logger._get_logging_mask(levels)
        return (mask & level) != 0

    @staticmethod
    def _colorize(label, color, msg):
        date = datetime.now().strftime(Logger._logging_cfg()['date_format'])
        if label:
            return f"{color.value}{label}{Style.RESET_ALL}{date} {msg}"
        return msg

    @staticmethod
    def _log_path() -> Path:
        cfg = Logger._logging_cfg()
        return Path(cfg.get('log_dir', 'logs')) / cfg['log_file']

    @staticmethod
    def add_to_log(msg, level_tag):
        date = datetime.now().strftime(Logger._logging_cfg()['date_format'])

        if level_tag:
            line = f"[{level_tag}] {date} {msg}"
        else:
            line = msg

        path = Logger._log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding='utf-8', errors='replace') as log:
            log.write(line + "\n")

    @staticmethod
    def reset_log():
        path = Logger._log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        open(path, "w").close()

    @staticmethod
    def _emit(level: DebugLevel, color: DebugColorLevel, tag: str, msg):
        if Logger._should_log(level):
            print(Logger._colorize(f"[{tag}]", color, msg))
        if Logger._should_log_file(level):
            Logger.add_to_log(msg, tag)

    # ===================================================================
    # Console + File logging methods
    # ===================================================================

    @staticmethod
    def debug(msg):
        Logger._emit(DebugLevel.DEBUG, DebugColorLevel.DEBUG, "DEBUG", msg)

    @staticmethod
    def info(msg):
        Logger._emit(DebugLevel.INFO, DebugColorLevel.INFO, "INFO", msg)

    @staticmethod
    def warning(msg):
        Logger._emit(DebugLevel.WARNING, DebugColorLevel.WARNING, "WARNING", msg)

    @staticmethod
    def error(msg):
        Logger._emit(DebugLevel.ERROR, DebugColorLevel.ERROR, "ERROR", msg)

    @staticmethod
    def success(msg):
        Logger._emit(DebugLevel.SUCCESS, DebugColorLevel.SUCCESS, "SUCCESS", msg)
