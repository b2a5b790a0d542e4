import sys
from pathlib import Path
from loguru import logger
from contextvars import ContextVar
from typing import Optional, Dict, Any

from app.config import get_settings

# Context variabelen voor order en klant IDs
order_id_var: ContextVar[Optional[str]] = ContextVar('order_id', default=None)
customer_id_var: ContextVar[Optional[str]] = ContextVar('customer_id', default=None)

def get_context_info() -> Dict[str, Any]:
    """Haal context informatie op voor logging"""
    context = {}

    order_id = order_id_var.get()
    if order_id:
        context['order_id'] = order_id

    customer_id = customer_id_var.get()
    if customer_id:
        context['customer_id'] = customer_id

    return context

def setup_logging(to_files: bool = True):
    """Configureer Loguru logging met context-aware formatting"""
    settings = get_settings()

    # Verwijder standaard handler
    logger.remove()
    logger.configure(extra={"order_id": None, "customer_id": None})

    # Console handler met kleuren
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <blue>order_id={extra[order_id]}</blue> | <yellow>customer_id={extra[customer_id]}</yellow> | <level>{message}</level>",
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=True
    )

    if not to_files:
        return

    # File handler voor alle logs
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(exist_ok=True)

    logger.add(
        log_dir / "cashback.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | order_id={extra[order_id]} | customer_id={extra[customer_id]} | {message}",
        level="DEBUG",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression="zip"
    )

    # Error file handler
    logger.add(
        log_dir / "errors.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | order_id={extra[order_id]} | customer_id={extra[customer_id]} | {message}",
        level="ERROR",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression="zip"
    )

def _inject_context(record):
    # context wordt per log-regel gelezen, niet bij het aanmaken van de logger
    record["extra"].update({"order_id": None, "customer_id": None, **get_context_info()})

def get_logger(name: str = None):
    """Krijg een logger met context informatie"""
    if name:
        return logger.bind(component=name).patch(_inject_context)
    return logger

def set_context(order_id: Optional[str] = None, customer_id: Optional[str] = None):
    """Zet context variabelen voor logging"""
    if order_id is not None:
        order_id_var.set(order_id)
    if customer_id is not None:
        customer_id_var.set(customer_id)

def clear_context():
    """Wis alle context variabelen"""
    order_id_var.set(None)
    customer_id_var.set(None)

# Context manager voor automatische context setting
class LoggingContext:
    def __init__(self, order_id: Optional[str] = None, customer_id: Optional[str] = None):
        self.order_id = order_id
        self.customer_id = customer_id
        self.old_order_id = None
        self.old_customer_id = None

    def __enter__(self):
        self.old_order_id = order_id_var.get()
        self.old_customer_id = customer_id_var.get()

        set_context(self.order_id, self.customer_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        order_id_var.set(self.old_order_id)
        customer_id_var.set(self.old_customer_id)
