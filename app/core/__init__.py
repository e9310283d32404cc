"""Noyau applicatif : configuration, sécurité, authentification, erreurs."""
