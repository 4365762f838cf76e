import datetime
import inspect
import logging.config
import typing as t

from .logging import TRACE, TraceLogLevelLogger

TimestampProvider = t.Callable[..., datetime.datetime]


class LoggingProvider(object):
    Function: t.Final[t.Literal["fn"]] = "fn"
    Class: t.Final[t.Literal["cls"]] = "cls"
    Module: t.Final[t.Literal["mod"]] = "mod"

    def __init__(self, config: dict[str, t.Any], debug: bool):
        LoggingProvider.create_trace_loglevel()
        logging.config.dictConfig(config)
        if debug:
            self.capture_warnings(True)

    @staticmethod
    def create_trace_loglevel():
        """
        Create a log level TRACE = 5
        """
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")

    @classmethod
    def get_logger(
        cls, scope: t.Literal["mod", "cls", "fn"] = "mod", name: str | None = None, n_frames: int = 1
    ) -> TraceLogLevelLogger:
        if name:
            return t.cast(TraceLogLevelLogger, logging.getLogger(name))

        stack = inspect.stack()
        frame = stack[n_frames].frame
        mod = frame.f_globals["__name__"]
        match scope:
            case cls.Module:
                name = mod

            case cls.Function:
                fn = stack[n_frames].function
                if "self" in frame.f_locals:
                    name = f"{mod}.{frame.f_locals['self'].__class__.__name__}.{fn}"
                else:
                    name = f"{mod}.{fn}"

            case cls.Class:
                if "self" in frame.f_locals:
                    owner = frame.f_locals["self"].__class__
                elif "cls" in frame.f_locals and isinstance(frame.f_locals["cls"], type):
                    owner = frame.f_locals["cls"]
                else:
                    raise RuntimeError("could not determine class")
                name = f"{owner.__module__}.{owner.__name__}"

        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)
