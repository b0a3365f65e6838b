"""extend - CMS 扩展包管理编排层"""

__version__ = "0.3.0"
