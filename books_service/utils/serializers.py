def _iso(value):
    return value.isoformat() if value else None


def category_to_dict(c):
    return {
        "id": c.id,
        "name": c.name,
        "created_at": _iso(c.created_at),
        "updated_at": _iso(c.updated_at),
    }


def book_to_dict(b):
    return {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "isbn": b.isbn,
        "publication_year": b.publication_year,
        "publisher": b.publisher,
        "description": b.description,
        "cover_image": b.cover_image,
        "quantity": b.quantity,
        "available_quantity": b.available_quantity,
        "category_id": b.category_id,
        "category_name": b.category.name if b.category else None,
        "available": b.available,
        "created_at": _iso(b.created_at),
        "updated_at": _iso(b.updated_at),
    }


def book_summary(b):
    if b is None:
        return None
    return {"id": b.id, "title": b.title, "author": b.author, "cover_image": b.cover_image}


def borrowing_to_dict(x, with_student: bool = False):
    data = {
        "id": x.id,
        "book_id": x.book_id,
        "book": book_summary(x.book),
        "borrow_date": _iso(x.borrow_date),
        "due_date": _iso(x.due_date),
        "return_date": _iso(x.return_date),
        "status": x.status,
        "notes": x.notes,
        "created_at": _iso(x.created_at),
        "updated_at": _iso(x.updated_at),
    }
    if with_student:
        data["student"] = {
            "id": x.student_id,
            "name": x.student_name,
            "email": x.student_email,
        }
    return data
