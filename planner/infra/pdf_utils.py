import io
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from planner.logic.week.clock import week_days
from planner.utilities.constants import DAYS


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    return f"{hours}h" if hours else f"{mins}m"


def generate_pdf_for_week(week):
    """Generate a PDF agenda: Day / Time / Task / Duration / Done for the provided week."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    monday, sunday = week.week_id.monday(), week.week_id.sunday()
    elements = [
        Paragraph(f"Weekly Plan - {week.week_id} ({monday:%d %b} to {sunday:%d %b %Y})", styles["Title"]),
        Spacer(1, 16),
    ]

    dates = dict(zip(DAYS, week_days(week.week_id)))
    data = [["Day", "Time", "Task", "Duration", "Done"]]
    for task in week.sorted_tasks():
        day = task.scheduled_day
        title = task.title
        if task.hierarchy:
            title = f"{title} ({' > '.join(task.hierarchy)})"
        data.append([
            f"{day} ({dates[day]:%d/%m})" if day else "Unscheduled",
            task.scheduled_time or "-",
            Paragraph(escape(title), styles["BodyText"]),
            format_duration(task.duration),
            "x" if task.completed else "",
        ])
    if len(data) == 1:
        data.append(["-", "-", "No tasks planned", "-", ""])

    table = Table(data, repeatRows=1, colWidths=[110, 60, 440, 80, 50])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#3F51B5")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (-1,-1), "CENTER"),
        ("ALIGN", (2,1), (2,-1), "LEFT"),
        ("VALIGN", (0,0), (-1,-1), "MIDDLE"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
