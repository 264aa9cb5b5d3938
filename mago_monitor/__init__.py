"""Monitor MAGO TAG - leitura horária de Empacotamento com alerta por e-mail."""

__version__ = "1.0.0"
