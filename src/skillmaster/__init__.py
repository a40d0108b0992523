"""SkillMaster - a package manager for AI assistant markdown files."""

__version__ = "1.0.0"
