# freelance_api/services/mail_service.py
# 寄送系統信件 (註冊確認、忘記密碼)
# 實際的寄送服務 (SES / SMTP...) 由外部提供，這裡只負責組出信件內容並交給 transport
import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

class MailDeliveryError(Exception):
    """信件寄送失敗"""

# 信件範本：(主旨, 內文)
MAIL_TEMPLATES: Dict[str, tuple] = {
    "welcome": (
        "歡迎加入！請確認您的帳號",
        "{first_name} 您好，\n\n請點選以下連結完成註冊：\n{confirmation_link}\n",
    ),
    "passwordForgotten": (
        "重設您的密碼",
        "{first_name} 您好，\n\n請點選以下連結重設密碼：\n{reset_link}\n\n若您沒有提出此申請，請忽略此信。\n",
    ),
}

def _log_transport(to: str, subject: str, body: str) -> None:
    logger.info(f"寄出信件 to={to}, subject={subject}")
    logger.debug(body)

class MailService:
    def __init__(self, transport: Optional[Callable[[str, str, str], None]] = None):
        # 未指定 transport 時，只記錄到 log
        self.transport = transport or _log_transport

    async def send(self, template: str, to: str, **options) -> None:
        if template not in MAIL_TEMPLATES:
            raise ValueError(f"未知的信件範本: {template}")

        subject, body = MAIL_TEMPLATES[template]
        try:
            self.transport(to, subject, body.format(**options))
        except Exception as e:
            logger.error(f"寄送信件失敗 ({template} -> {to}): {e}", exc_info=True)
            raise MailDeliveryError(str(e)) from e
