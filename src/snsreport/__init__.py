"""
snsreport - end-of-run Chef report notifications over Amazon SNS.

- snsreport.core: errors, logging, execution context, settings
- snsreport.framework: the resolve/validate/build/filter/publish pipeline
- snsreport.cli: command line entry point
"""

__version__ = "0.4.0"

from snsreport.core.context import ExecutionContext
from snsreport.framework.dispatcher import DispatchResult, Dispatcher

__all__ = ["Dispatcher", "DispatchResult", "ExecutionContext", "__version__"]
