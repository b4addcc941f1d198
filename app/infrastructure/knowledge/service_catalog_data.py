from __future__ import annotations

from app.domain.entities.service_catalog import ServiceCatalogEntry

# WhatsApp list messages carry at most 10 rows in total.
SERVICE_CATALOG: tuple[ServiceCatalogEntry, ...] = (
    ServiceCatalogEntry(
        service_id="service_فحص_عام",
        title="فحص عام",
        description="فحص شامل للأسنان والتشخيص",
        section="الخدمات الأساسية",
        aliases=("checkup", "check up", "general exam"),
    ),
    ServiceCatalogEntry(
        service_id="service_تنظيف_الأسنان",
        title="تنظيف الأسنان",
        description="تنظيف وإزالة الجير والتصبغات",
        section="الخدمات الأساسية",
        aliases=("تنظيف", "cleaning"),
    ),
    ServiceCatalogEntry(
        service_id="service_تبييض_الأسنان",
        title="تبييض الأسنان",
        description="تبييض الأسنان بالليزر",
        section="الخدمات الأساسية",
        aliases=("تبييض", "whitening"),
    ),
    ServiceCatalogEntry(
        service_id="service_حشو_الأسنان",
        title="حشو الأسنان",
        description="علاج التسوس وحشو الأسنان",
        section="الخدمات الأساسية",
        aliases=("حشوة", "filling"),
    ),
    ServiceCatalogEntry(
        service_id="service_علاج_الجذور",
        title="علاج الجذور",
        description="علاج قناة الجذر والعصب",
        section="الخدمات المتقدمة",
        aliases=("عصب", "root canal"),
    ),
    ServiceCatalogEntry(
        service_id="service_تقويم_الأسنان",
        title="تقويم الأسنان",
        description="علاج اعوجاج الأسنان",
        section="الخدمات المتقدمة",
        aliases=("تقويم", "braces", "orthodontics"),
    ),
    ServiceCatalogEntry(
        service_id="service_خلع_الأسنان",
        title="خلع الأسنان",
        description="خلع بسيط أو جراحي",
        section="الخدمات المتقدمة",
        aliases=("خلع", "extraction"),
    ),
    ServiceCatalogEntry(
        service_id="service_زراعة_الأسنان",
        title="زراعة الأسنان",
        description="زراعة الأسنان المفقودة",
        section="خدمات التجميل",
        aliases=("زراعة", "implant"),
    ),
    ServiceCatalogEntry(
        service_id="service_ابتسامة_هوليود",
        title="ابتسامة هوليود",
        description="تصميم ابتسامة تجميلية",
        section="خدمات التجميل",
        aliases=("هوليود", "hollywood smile", "veneers", "فينير"),
    ),
    ServiceCatalogEntry(
        service_id="service_خدمة_أخرى",
        title="خدمة أخرى",
        description="اختر إذا كانت الخدمة غير موجودة",
        section="خدمات التجميل",
        aliases=("other",),
    ),
)
