"""Logging framework with decorators, context managers, and component detection.

- ``SmartLogger`` injects component, correlation ID and scoped context
- ``log_execution`` logs start/complete/error of sync and async callables
- ``log_operation`` scopes a correlation ID and context over a block
"""

import functools
import inspect
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional, Callable, Union
import threading

from .multi_file_logger import get_multi_file_logger

# Thread-local storage for context
_local = threading.local()


def _get_component_from_module(module_name: str) -> str:
    """Auto-detect component from module path."""
    component_map = {
        'tools.salesforce.reports': 'reports',
        'tools.salesforce.report_formatter': 'reports',
        'tools.salesforce': 'salesforce',
        'utils.config': 'config',
        'reports_cli': 'reports',
    }

    for pattern, component in component_map.items():
        if pattern in module_name:
            return component

    return 'system'


def _get_correlation_id() -> Optional[str]:
    return getattr(_local, 'correlation_id', None)


def _set_correlation_id(correlation_id: Optional[str]):
    _local.correlation_id = correlation_id


def _get_operation_context() -> Dict[str, Any]:
    return getattr(_local, 'operation_context', {})


def _update_operation_context(context: Dict[str, Any]):
    current = dict(getattr(_local, 'operation_context', {}))
    current.update(context)
    _local.operation_context = current


class SmartLogger:
    """Logger that auto-detects its component and injects scoped context."""

    def __init__(self, component: Optional[str] = None, auto_detect: bool = True):
        """Initialize smart logger.

        Args:
            component: Explicit component name
            auto_detect: Whether to auto-detect component from caller
        """
        self._logger = get_multi_file_logger()

        if component:
            self._component = component
        elif auto_detect:
            frame = inspect.currentframe()
            try:
                caller_frame = frame.f_back
                module_name = caller_frame.f_globals.get('__name__', 'unknown')
                self._component = _get_component_from_module(module_name)
            finally:
                del frame
        else:
            self._component = 'system'

    @property
    def component(self) -> str:
        return self._component

    def _log(self, level: str, message: str, **kwargs):
        kwargs.setdefault('component', self._component)

        correlation_id = _get_correlation_id()
        if correlation_id:
            kwargs['correlation_id'] = correlation_id

        for key, value in _get_operation_context().items():
            kwargs.setdefault(key, value)

        getattr(self._logger, level)(message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('info', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log('error', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('warning', message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log('debug', message, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        """Check if logger is enabled for given level.

        Args:
            level: Logging level (10=DEBUG, 20=INFO, 30=WARNING, 40=ERROR)
        """
        return self._logger.isEnabledFor(level)


def _preview(result: Any) -> Dict[str, Any]:
    result_str = str(result)
    if len(result_str) > 1000:
        return {'result_preview': result_str[:500] + '...', 'result_size': len(result_str)}
    return {'result': result}


def log_execution(func_or_component: Union[Callable, str, None] = None, operation: Optional[str] = None,
                  include_args: bool = True, include_result: bool = True,
                  log_errors: bool = True, component: Optional[str] = None):
    """Decorator for automatic function/method execution logging.

    Works for plain functions and coroutine functions alike.

    Example:
        @log_execution  # Auto-detect component
        @log_execution("salesforce", "describe_report")
        @log_execution(component="reports", operation="execute")
        async def execute(self, options): ...
    """
    if callable(func_or_component):
        return _create_wrapper(func_or_component, component, operation,
                               include_args, include_result, log_errors)

    actual_component = func_or_component or component

    def decorator(func: Callable) -> Callable:
        return _create_wrapper(func, actual_component, operation,
                               include_args, include_result, log_errors)
    return decorator


def _create_wrapper(func: Callable, component: Optional[str], operation: Optional[str],
                    include_args: bool, include_result: bool, log_errors: bool) -> Callable:
    op_name = operation or func.__name__
    func_component = component or _get_component_from_module(func.__module__)

    def _start(args, kwargs):
        func_logger = SmartLogger(func_component)
        exec_id = str(uuid.uuid4())[:8]

        log_args = {}
        if include_args and args:
            # Skip 'self' for methods
            start_idx = 1 if hasattr(args[0], func.__name__) else 0
            log_args['args'] = args[start_idx:]
        if include_args and kwargs:
            log_args['kwargs'] = kwargs

        func_logger.info(f"function_start_{op_name}",
                         operation=op_name,
                         function=func.__name__,
                         execution_id=exec_id,
                         **log_args)
        return func_logger, exec_id, time.time()

    def _complete(func_logger, exec_id, start_time, result):
        func_logger.info(f"function_complete_{op_name}",
                         operation=op_name,
                         function=func.__name__,
                         execution_id=exec_id,
                         duration_seconds=round(time.time() - start_time, 3),
                         success=True,
                         **(_preview(result) if include_result else {}))

    def _fail(func_logger, exec_id, start_time, error):
        if log_errors:
            func_logger.error(f"function_error_{op_name}",
                              operation=op_name,
                              function=func.__name__,
                              execution_id=exec_id,
                              duration_seconds=round(time.time() - start_time, 3),
                              success=False,
                              error=str(error),
                              error_type=type(error).__name__)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            func_logger, exec_id, start_time = _start(args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _fail(func_logger, exec_id, start_time, e)
                raise
            _complete(func_logger, exec_id, start_time, result)
            return result
        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        func_logger, exec_id, start_time = _start(args, kwargs)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _fail(func_logger, exec_id, start_time, e)
            raise
        _complete(func_logger, exec_id, start_time, result)
        return result
    return wrapper


@contextmanager
def log_operation(component: Optional[str] = None, operation: str = "operation",
                  correlation_id: Optional[str] = None, **context):
    """Context manager for scoped operation logging with automatic correlation.

    Args:
        component: Component name (auto-detected if not provided)
        operation: Operation name
        correlation_id: Correlation ID (generated if not provided)
        **context: Additional context to include in all logs within scope

    Example:
        with log_operation("reports", "execute", report_id=report_id):
            result = await report.execute(options)
    """
    if not component:
        frame = inspect.currentframe()
        try:
            # frame.f_back is contextlib's __enter__, one more hop reaches the caller
            caller_frame = frame.f_back.f_back
            module_name = caller_frame.f_globals.get('__name__', 'unknown')
            component = _get_component_from_module(module_name)
        finally:
            del frame

    if not correlation_id:
        correlation_id = str(uuid.uuid4())[:8]

    op_logger = SmartLogger(component)

    prev_correlation_id = _get_correlation_id()
    prev_context = _get_operation_context()

    _set_correlation_id(correlation_id)
    _update_operation_context({'operation': operation, **context})

    op_logger.info(f"operation_start_{operation}")
    start_time = time.time()

    try:
        yield correlation_id
        op_logger.info(f"operation_complete_{operation}",
                       duration_seconds=round(time.time() - start_time, 3),
                       success=True)
    except Exception as e:
        op_logger.error(f"operation_error_{operation}",
                        duration_seconds=round(time.time() - start_time, 3),
                        success=False,
                        error=str(e),
                        error_type=type(e).__name__)
        raise
    finally:
        _set_correlation_id(prev_correlation_id)
        _local.operation_context = prev_context
