"""
PDFEmbed - embed wiki-hosted PDF files in rendered pages.

Subpackages:
- config: environment configuration and logging setup
- embed: the <pdf> tag handler and its collaborator interfaces
- wiki: title normalization and MediaWiki Action API collaborators
"""

__version__ = "2.0.2"
