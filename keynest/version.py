"""KeyNest Meta information.
   KeyNest seals a local credential vault behind a master password.
"""
__title__ = 'keynest'
__description__ = (
   'KeyNest seals a local credential vault '
   'behind a master password.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2026 KeyNest Developers'
__author__ = 'KeyNest Developers'
__author_email__ = 'dev@keynest.invalid'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/keynest/keynest'
