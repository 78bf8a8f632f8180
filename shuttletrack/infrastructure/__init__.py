"""
Infrastructure layer package.

Contains adapters that implement domain ports against concrete
storage engines. The domain never imports from here.
"""
