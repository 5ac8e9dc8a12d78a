# SPDX-License-Identifier: Apache-2.0

__all__ = [
    "__title__",
    "__summary__",
    "__uri__",
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",
]

__title__ = "formgate"
__summary__ = "reCAPTCHA v3 verification gate for subscribe form pipelines"
__uri__ = "https://github.com/formgate/formgate"

__version__ = "1.0.0.dev0"

__author__ = "The formgate developers"
__email__ = "dev@formgate.invalid"

__license__ = "Apache License, Version 2.0"
__copyright__ = "Copyright 2026 The formgate developers"
