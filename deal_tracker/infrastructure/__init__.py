"""Infraestrutura: banco de dados, arquivos e autenticação."""
