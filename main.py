import logging
import uvicorn
import os
from logging.handlers import RotatingFileHandler
from datetime import datetime

from nurse_funnel.api.http import create_app

# Criar diretório de logs se não existir
log_dir = "logs"
os.makedirs(log_dir, exist_ok=True)

log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
date_format = "%Y-%m-%d %H:%M:%S"

root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)

console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter(log_format, date_format))

# Rotação: máximo 10MB por arquivo, mantém 5 backups
log_file = os.path.join(log_dir, "app.log")
file_handler = RotatingFileHandler(
    log_file,
    maxBytes=10 * 1024 * 1024,
    backupCount=5,
    encoding='utf-8'
)
file_handler.setLevel(logging.INFO)
file_handler.setFormatter(logging.Formatter(log_format, date_format))

root_logger.addHandler(console_handler)
root_logger.addHandler(file_handler)

logging.info(f"Logging configurado. Arquivo de log: {log_file}")
logging.info(f"Funil de leads iniciado em {datetime.now().strftime(date_format)}")

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info",
    )
