# pharmashe/engine/__init__.py

"""Engine package providing the medical term classifier and text segmenter.

This package contains the pure, stateless text processing used to mark
complex medical terms in an analysis as dictionary lookups.
"""
