"""Core - Configuracao, logging e taxonomia de erros."""
