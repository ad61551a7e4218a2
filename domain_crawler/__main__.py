"""
Main entry point for the domain_crawler package.

Allows running the crawler as: python -m domain_crawler
"""

from domain_crawler.cli import main

if __name__ == "__main__":
    main()
