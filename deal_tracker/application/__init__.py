"""Aplicação: orquestração dos casos de uso."""
