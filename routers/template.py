from fastapi import APIRouter
from fastapi.responses import Response

from config.settings import XLSX_MIME_TYPE
from services.spreadsheet import TEMPLATE_FILENAME, build_template

router = APIRouter(prefix="/template", tags=["업로드 양식"])


# ✅ [DOWNLOAD] 업로드용 엑셀 양식 (예시 3행 포함)
@router.get("/download")
def download_template():
    return Response(
        content=build_template(),
        media_type=XLSX_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )
