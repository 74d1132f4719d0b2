HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>
        body {{
            font-family: Arial, sans-serif;
            line-height: 1.6;
            color: #333;
        }}
        .container {{
            width: 90%;
            margin: 20px auto;
            border: 1px solid #ddd;
            border-radius: 8px;
        }}
        .header {{
            background-color: #0b7285;
            color: white;
            padding: 16px;
            text-align: center;
        }}
        .content {{
            padding: 24px;
        }}
        .content th, .content td {{
            padding: 10px;
            border: 1px solid #eee;
            text-align: left;
            vertical-align: top;
        }}
        .content th {{
            background-color: #f9f9f9;
            width: 30%;
        }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h2>MEDetech: Incorrect Identification Report</h2>
        </div>
        <div class="content">
            <p>A user flagged the following identification result as incorrect.</p>
            <table>
                <tr>
                    <th>Medicine Shown</th>
                    <td>{medicine_name}</td>
                </tr>
                <tr>
                    <th>Generic Name</th>
                    <td>{generic_name}</td>
                </tr>
                <tr>
                    <th>Confidence</th>
                    <td>{confidence}</td>
                </tr>
                <tr>
                    <th>Model Analysis Notes</th>
                    <td>{analysis_notes}</td>
                </tr>
                <tr>
                    <th>History Entry</th>
                    <td>{history_id}</td>
                </tr>
                <tr>
                    <th>User's Reason</th>
                    <td>{reason}</td>
                </tr>
            </table>
            <p style="margin-top: 20px;">The scanned photo is attached when the user provided one.</p>
        </div>
    </div>
</body>
</html>
"""
