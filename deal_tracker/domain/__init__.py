"""Camada de domínio: entidades, regras e serviços puros."""
