"""Embedding oracle implementations.

InsightFaceRecognitionService needs the optional ``oracle`` extra and is
imported from its module directly so the rest of the package stays light.
"""
